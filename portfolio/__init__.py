"""Top-level package exports."""

from .logging_config import configure_logging

configure_logging()

from .locales import LocaleManager  # noqa: E402
from .playback import TimeSyncPlayer  # noqa: E402
from .qa import FAQMatcher  # noqa: E402
from .session import ChatSessionManager  # noqa: E402

__all__ = ["ChatSessionManager", "FAQMatcher", "LocaleManager", "TimeSyncPlayer"]
