import pytest

from portfolio.loaders import generate_word_timings, load_subtitles
from portfolio.models import Subtitle, WordTiming
from portfolio.subtitles import (
    WORD_ACTIVE,
    WORD_FUTURE,
    WORD_PAST,
    derive_active_subtitle,
    derive_active_word_index,
    format_time,
    progress_percent,
    total_duration,
    word_states,
)

INTRO_TEXT = "Hi, my name is Nguyen Vo."


def _gapped_subtitle():
    return Subtitle(
        id=99,
        start=0.0,
        end=4.0,
        text="one two",
        words=(WordTiming("one", 0.0, 1.0), WordTiming("two", 2.0, 3.0)),
    )


def test_word_timings_tile_the_caption():
    words = generate_word_timings(INTRO_TEXT, 0.3, 2.0)

    assert [word.word for word in words] == ["Hi,", "my", "name", "is", "Nguyen", "Vo."]
    assert words[0].start == 0.3
    assert words[-1].end == 2.0
    for previous, current in zip(words, words[1:]):
        assert current.start == previous.end
    for word in words:
        assert word.end > word.start


def test_word_durations_are_proportional_to_length():
    words = generate_word_timings(INTRO_TEXT, 0.3, 2.0)
    durations = {word.word: word.end - word.start for word in words}

    # 20 characters over 1.7 seconds.
    assert durations["Nguyen"] == pytest.approx(1.7 * 6 / 20)
    assert durations["my"] == pytest.approx(durations["is"])
    assert durations["Nguyen"] > durations["name"] > durations["my"]


def test_blank_text_has_no_words():
    assert generate_word_timings("   ", 0.0, 1.0) == ()


def test_loaded_subtitles_are_ordered_and_do_not_overlap():
    subtitles = load_subtitles()

    assert len(subtitles) == 11
    for previous, current in zip(subtitles, subtitles[1:]):
        assert previous.end <= current.start
    for subtitle in subtitles:
        assert subtitle.words[0].start == subtitle.start
        assert subtitle.words[-1].end == subtitle.end


@pytest.mark.parametrize("moment", [0.0, 0.29, 2.2, 76.0, 120.0])
def test_no_subtitle_outside_caption_ranges(moment):
    assert derive_active_subtitle(moment) is None


def test_active_subtitle_uses_half_open_ranges():
    assert derive_active_subtitle(0.3).id == 1
    assert derive_active_subtitle(1.99).id == 1
    assert derive_active_subtitle(2.0) is None
    assert derive_active_subtitle(75.9).id == 11


def test_active_word_is_never_blank_inside_a_caption():
    for subtitle in load_subtitles():
        steps = 50
        for step in range(steps):
            moment = subtitle.start + (subtitle.end - subtitle.start) * step / steps
            assert derive_active_word_index(subtitle, moment) != -1


def test_word_boundaries_hand_over_to_the_next_word():
    subtitle = load_subtitles()[0]

    for index, word in enumerate(subtitle.words[:-1]):
        assert derive_active_word_index(subtitle, word.end) == index + 1
    assert derive_active_word_index(subtitle, subtitle.words[-1].end) == len(subtitle.words) - 1


def test_gap_between_words_keeps_previous_word():
    subtitle = _gapped_subtitle()

    assert derive_active_word_index(subtitle, 0.5) == 0
    assert derive_active_word_index(subtitle, 1.5) == 0
    assert derive_active_word_index(subtitle, 2.5) == 1
    assert derive_active_word_index(subtitle, 3.5) == 1


def test_before_caption_start_has_no_active_word():
    subtitle = load_subtitles()[1]

    assert derive_active_word_index(subtitle, subtitle.start - 0.1) == -1


def test_word_states():
    subtitle = _gapped_subtitle()

    assert word_states(subtitle, 2.5) == [WORD_PAST, WORD_ACTIVE]
    assert word_states(subtitle, 0.5) == [WORD_ACTIVE, WORD_FUTURE]


def test_total_duration():
    assert total_duration() == 76.0
    assert total_duration([]) == 0.0


def test_progress_percent():
    assert progress_percent(19.0, 76.0) == pytest.approx(25.0)
    assert progress_percent(5.0, 0.0) == 0.0
    assert progress_percent(90.0, 76.0) == 100.0


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0:00"), (9.9, "0:09"), (65.2, "1:05"), (600, "10:00"), (float("nan"), "0:00")],
)
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected
