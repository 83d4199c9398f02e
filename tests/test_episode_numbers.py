import pytest

from anisub.models import SubtitleFile
from anisub.services.episode_numbers import EPISODE_MATCHERS, resolve_episode_number, resolve_episodes


pytestmark = pytest.mark.matching


def _matcher(name):
    return next(m for m in EPISODE_MATCHERS if m.name == name)


def test_mixed_naming_styles():
    names = ["Show - Ep01.srt", "Show.E2.ass", "Show_03.vtt"]
    assert [resolve_episode_number(n) for n in names] == [1, 2, 3]


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("[Group] Title - Episode 12 [1080p].ass", 12),
        ("Title_EP_07.srt", 7),
        ("title.ep-5.srt", 5),
        ("Title S01E05 1080p.srt", 5),
        ("Title - 08 (1080p).srt", 8),
        ("24.ass", 24),
    ],
)
def test_precedence(filename, expected):
    assert resolve_episode_number(filename) == expected


def test_no_digits_is_no_match():
    assert resolve_episode_number("Title - Special.srt") is None
    assert resolve_episode_number("") is None


def test_explicit_tier_beats_bare_digits():
    # Without the explicit token the resolution tag would win.
    assert resolve_episode_number("Title 1080p Episode 4.srt") == 4
    assert resolve_episode_number("Title 1080p.srt") == 1080


def test_explicit_tier_needs_letter_boundary():
    explicit = _matcher("explicit")
    assert explicit.match("Deep05.srt") is None
    assert explicit.match("Show - ep5.srt") == 5


def test_e_prefix_tier_ignores_words():
    e_prefix = _matcher("e-prefix")
    assert e_prefix.match("Sake2.srt") is None
    assert e_prefix.match("Show.E2.ass") == 2


def test_bare_digit_tier():
    bare = _matcher("bare-digits")
    assert bare.match("Show_03.vtt") == 3
    assert bare.match("no numbers") is None


def test_first_file_wins_per_episode():
    files = [
        SubtitleFile(filename="Ep01.srt", url="https://jimaku.test/a"),
        SubtitleFile(filename="01.vtt", url="https://jimaku.test/b"),
        SubtitleFile(filename="Ep02.srt", url="https://jimaku.test/c"),
        SubtitleFile(filename="notes.txt", url="https://jimaku.test/d"),
    ]
    episodes = resolve_episodes(files)
    assert [e.episode_number for e in episodes] == [1, 2]
    first = [e for e in episodes if e.episode_number == 1]
    assert len(first) == 1
    assert first[0].subtitle_url == "https://jimaku.test/a"
    assert first[0].source_filename == "Ep01.srt"
