"""Playback clock for the narrated intro.

The engine never decodes audio. It listens to a ``MediaHandle`` for
play/pause/end transitions and, while playing, samples the handle's position
once per tick from an injected ``TickSource``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Sequence

from .loaders import load_subtitles
from .models import Subtitle
from .subtitles import derive_active_subtitle, derive_active_word_index, progress_percent

logger = logging.getLogger(__name__)

EVENT_METADATA = "loadedmetadata"
EVENT_PLAY = "play"
EVENT_PAUSE = "pause"
EVENT_ENDED = "ended"


class PlaybackBlockedError(RuntimeError):
    """Raised by a media handle when playback is refused, e.g. blocked autoplay."""


class MediaHandle:
    """Minimal media element contract consumed by ``TimeSyncPlayer``."""

    def __init__(self, source: str):
        self.source = source
        self.duration = 0.0
        self.ready = False
        self._listeners: Dict[str, List[Callable[[], None]]] = defaultdict(list)

    @property
    def current_time(self) -> float:
        raise NotImplementedError

    def on(self, event: str, callback: Callable[[], None]) -> None:
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Callable[[], None]) -> None:
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            callback()

    def load(self) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def set_position(self, seconds: float) -> None:
        raise NotImplementedError

    def release(self) -> None:
        self._listeners.clear()


class SimulatedMedia(MediaHandle):
    """Offline media handle whose position only moves through ``advance``."""

    def __init__(self, source: str, duration: float, *, block_play: bool = False):
        super().__init__(source)
        self._known_duration = float(duration)
        self._position = 0.0
        self.playing = False
        self.block_play = block_play

    @property
    def current_time(self) -> float:
        return self._position

    def load(self) -> None:
        self.duration = self._known_duration
        self.ready = True
        self.emit(EVENT_METADATA)

    def play(self) -> None:
        if self.block_play:
            raise PlaybackBlockedError(f"Playback of {self.source} was blocked")
        if self.playing:
            return
        if self._position >= self.duration:
            self._position = 0.0
        self.playing = True
        self.emit(EVENT_PLAY)

    def pause(self) -> None:
        if not self.playing:
            return
        self.playing = False
        self.emit(EVENT_PAUSE)

    def set_position(self, seconds: float) -> None:
        self._position = seconds

    def advance(self, seconds: float) -> None:
        if not self.playing:
            return
        self._position = min(self.duration, self._position + seconds)
        if self._position >= self.duration:
            self.playing = False
            self.emit(EVENT_ENDED)


class TickSource:
    """Schedules one callback per rendered frame."""

    def request(self, callback: Callable[[], None]) -> int:
        raise NotImplementedError

    def cancel(self, handle: int) -> None:
        raise NotImplementedError


class ManualTickSource(TickSource):
    def __init__(self):
        self._next_handle = 0
        self._pending: Dict[int, Callable[[], None]] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: Callable[[], None]) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def step(self) -> int:
        """Run the callbacks due this frame; those they request run next frame."""
        due = self._pending
        self._pending = {}
        for callback in due.values():
            callback()
        return len(due)


@dataclass
class PlaybackClock:
    current_time: float = 0.0
    duration: float = 0.0
    is_playing: bool = False
    is_loaded: bool = False


ClockListener = Callable[[PlaybackClock], None]


class TimeSyncPlayer:
    def __init__(self, tick_source: TickSource, subtitles: Sequence[Subtitle] | None = None):
        self.tick_source = tick_source
        self.subtitles: Sequence[Subtitle] = subtitles if subtitles is not None else load_subtitles()
        self.clock = PlaybackClock()
        self.media: MediaHandle | None = None
        self._frame: int | None = None
        self._autoplay = False
        self._listeners: List[ClockListener] = []
        self._handlers = {
            EVENT_METADATA: self._on_metadata,
            EVENT_PLAY: self._on_play,
            EVENT_PAUSE: self._on_pause,
            EVENT_ENDED: self._on_ended,
        }

    def subscribe(self, listener: ClockListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> PlaybackClock:
        return replace(self.clock)

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def initialize(self, media: MediaHandle, *, autoplay: bool = False) -> None:
        """Attach to ``media`` and load it.

        With ``autoplay`` the player tries to start as soon as metadata
        arrives. A blocked start leaves the clock paused at zero.
        """
        self.release()
        self.media = media
        self._autoplay = autoplay
        self.clock = PlaybackClock()
        for event, handler in self._handlers.items():
            media.on(event, handler)
        media.load()

    def release(self) -> None:
        self._cancel_frame()
        if self.media is None:
            return
        for event, handler in self._handlers.items():
            self.media.off(event, handler)
        if self.clock.is_playing:
            self.media.pause()
        self.media = None
        self.clock = PlaybackClock()

    def _ready(self) -> bool:
        return self.media is not None and self.clock.is_loaded

    def _on_metadata(self) -> None:
        self.clock.duration = self.media.duration
        self.clock.is_loaded = True
        logger.info("Loaded %s (%.1fs).", self.media.source, self.clock.duration)
        self._publish()
        if self._autoplay:
            self.play()

    def _on_play(self) -> None:
        self.clock.is_playing = True
        self._schedule()
        self._publish()

    def _on_pause(self) -> None:
        self.clock.is_playing = False
        self._cancel_frame()
        self._publish()

    def _on_ended(self) -> None:
        self.clock.is_playing = False
        self.clock.current_time = 0.0
        self._cancel_frame()
        self._publish()

    def _schedule(self) -> None:
        if self._frame is None:
            self._frame = self.tick_source.request(self._tick)

    def _cancel_frame(self) -> None:
        if self._frame is not None:
            self.tick_source.cancel(self._frame)
            self._frame = None

    def _tick(self) -> None:
        self._frame = None
        if not self.clock.is_playing or self.media is None:
            return
        self.clock.current_time = self.media.current_time
        self._publish()
        if self.clock.is_playing:
            self._schedule()

    def play(self) -> bool:
        if not self._ready():
            return False
        try:
            self.media.play()
        except PlaybackBlockedError as exc:
            logger.info("Playback not started: %s", exc)
            return False
        return self.clock.is_playing

    def pause(self) -> None:
        if self._ready():
            self.media.pause()

    def toggle(self) -> bool:
        if self.clock.is_playing:
            self.pause()
            return False
        return self.play()

    def seek(self, seconds: float) -> None:
        if not self._ready():
            return
        target = min(max(0.0, float(seconds)), self.clock.duration)
        self.media.set_position(target)
        self.clock.current_time = target
        self._publish()

    @property
    def progress(self) -> float:
        return progress_percent(self.clock.current_time, self.clock.duration)

    def active_subtitle(self) -> Subtitle | None:
        return derive_active_subtitle(self.clock.current_time, self.subtitles)

    def active_word_index(self) -> int:
        subtitle = self.active_subtitle()
        if subtitle is None:
            return -1
        return derive_active_word_index(subtitle, self.clock.current_time)
