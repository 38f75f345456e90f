import pytest

from portfolio.playback import (
    ManualTickSource,
    MediaHandle,
    PlaybackClock,
    SimulatedMedia,
    TimeSyncPlayer,
)


class SilentMedia(MediaHandle):
    """Media whose metadata never arrives."""

    def __init__(self):
        super().__init__("silent.m4a")
        self.positions = []
        self.play_calls = 0

    @property
    def current_time(self):
        return 0.0

    def load(self):
        pass

    def play(self):
        self.play_calls += 1

    def pause(self):
        pass

    def set_position(self, seconds):
        self.positions.append(seconds)


def test_initialize_publishes_metadata(player):
    assert player.clock == PlaybackClock(current_time=0.0, duration=76.0, is_playing=False, is_loaded=True)


def test_play_samples_media_time_every_tick(player, media, ticks):
    assert player.play() is True
    assert ticks.pending == 1

    media.advance(1.5)
    ticks.step()
    assert player.clock.current_time == pytest.approx(1.5)

    media.advance(0.5)
    ticks.step()
    assert player.clock.current_time == pytest.approx(2.0)
    assert ticks.pending == 1


def test_pause_stops_the_sampling_loop(player, media, ticks):
    player.play()
    media.advance(1.0)
    ticks.step()

    player.pause()

    assert player.clock.is_playing is False
    assert ticks.pending == 0
    media.set_position(5.0)
    assert ticks.step() == 0
    assert player.clock.current_time == pytest.approx(1.0)


def test_tick_after_stop_does_not_reschedule(media):
    ticks = ManualTickSource()
    player = TimeSyncPlayer(ticks)
    player.initialize(media)
    player.play()
    # Flip the flag without going through pause so the pending frame still fires.
    player.clock.is_playing = False

    ticks.step()

    assert ticks.pending == 0


def test_end_of_media_rewinds_clock(player, media, ticks):
    player.play()
    media.advance(80.0)

    assert player.clock.is_playing is False
    assert player.clock.current_time == 0.0
    assert ticks.pending == 0


def test_seek_updates_time_immediately_and_clamps(player, media, ticks):
    player.seek(10.0)
    assert player.clock.current_time == 10.0
    assert media.current_time == 10.0
    assert ticks.pending == 0

    player.seek(-3.0)
    assert player.clock.current_time == 0.0

    player.seek(500.0)
    assert player.clock.current_time == 76.0


def test_blocked_autoplay_is_not_fatal(ticks, caplog):
    caplog.set_level("INFO")
    player = TimeSyncPlayer(ticks)
    player.initialize(SimulatedMedia("intro.m4a", 76.0, block_play=True))

    assert player.play() is False
    assert player.toggle() is False
    assert player.clock.is_playing is False
    assert ticks.pending == 0
    assert any("Playback not started" in record.message for record in caplog.records)


def test_autoplay_starts_once_metadata_arrives(ticks):
    media = SimulatedMedia("intro.m4a", 76.0)
    player = TimeSyncPlayer(ticks)
    player.initialize(media, autoplay=True)

    assert player.clock.is_loaded is True
    assert player.clock.is_playing is True
    assert ticks.pending == 1

    media.advance(2.0)
    ticks.step()
    assert player.clock.current_time == 2.0


def test_rejected_autoplay_leaves_clock_paused(ticks, caplog):
    caplog.set_level("INFO")
    player = TimeSyncPlayer(ticks)
    player.initialize(SimulatedMedia("intro.m4a", 76.0, block_play=True), autoplay=True)

    assert player.clock.is_loaded is True
    assert player.clock.is_playing is False
    assert player.clock.current_time == 0.0
    assert ticks.pending == 0
    assert any("Playback not started" in record.message for record in caplog.records)


def test_autoplay_is_off_by_default(player, ticks):
    assert player.clock.is_playing is False
    assert ticks.pending == 0


def test_autoplay_never_fires_without_metadata(ticks):
    media = SilentMedia()
    TimeSyncPlayer(ticks).initialize(media, autoplay=True)

    assert media.play_calls == 0


def test_requests_against_unready_media_are_noops(ticks):
    media = SilentMedia()
    player = TimeSyncPlayer(ticks)
    player.initialize(media)

    assert player.clock.is_loaded is False
    assert player.play() is False
    player.seek(12.0)
    player.pause()

    assert media.play_calls == 0
    assert media.positions == []
    assert player.clock.current_time == 0.0


def test_requests_without_media_are_noops(ticks):
    player = TimeSyncPlayer(ticks)

    assert player.play() is False
    player.seek(3.0)
    assert player.clock.current_time == 0.0


def test_toggle_alternates(player):
    assert player.toggle() is True
    assert player.clock.is_playing is True
    assert player.toggle() is False
    assert player.clock.is_playing is False


def test_active_caption_follows_the_clock(player):
    assert player.active_subtitle() is None
    assert player.active_word_index() == -1

    player.seek(0.5)
    assert player.active_subtitle().id == 1
    assert player.active_word_index() == 0

    player.seek(1.0)
    assert player.active_word_index() == 2

    player.seek(2.2)
    assert player.active_subtitle() is None


def test_progress(player):
    player.seek(38.0)

    assert player.progress == pytest.approx(50.0)


def test_subscribers_receive_clock_snapshots(player, media, ticks):
    seen = []
    unsubscribe = player.subscribe(seen.append)

    player.play()
    media.advance(0.25)
    ticks.step()
    unsubscribe()
    player.pause()

    assert [snapshot.is_playing for snapshot in seen] == [True, True]
    assert seen[-1].current_time == pytest.approx(0.25)


def test_release_detaches_from_media(player, media, ticks):
    player.play()
    player.release()

    assert player.media is None
    assert media.playing is False
    assert ticks.pending == 0
    media.play()
    assert player.clock.is_playing is False
