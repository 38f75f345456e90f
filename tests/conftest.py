import os
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_SETTINGS_DIR = tempfile.mkdtemp(prefix="portfolio-settings-")
os.environ.setdefault("PORTFOLIO_SETTINGS", str(Path(_SETTINGS_DIR) / "settings.json"))

from portfolio.playback import ManualTickSource, SimulatedMedia, TimeSyncPlayer  # noqa: E402
from portfolio.qa import FAQMatcher  # noqa: E402
from portfolio.session import ChatSessionManager  # noqa: E402
from portfolio.storage import MappingSessionStore  # noqa: E402


@pytest.fixture
def matcher():
    return FAQMatcher()


@pytest.fixture
def backing():
    return {}


@pytest.fixture
def store(backing):
    return MappingSessionStore(backing, key="test-session")


@pytest.fixture
def manager(matcher, store):
    return ChatSessionManager(matcher=matcher, store=store, delay_factory=lambda: 0.0, suggestion_count=4)


@pytest.fixture
def ticks():
    return ManualTickSource()


@pytest.fixture
def media():
    return SimulatedMedia("intro.m4a", 76.0)


@pytest.fixture
def player(ticks, media):
    engine = TimeSyncPlayer(ticks)
    engine.initialize(media)
    return engine
