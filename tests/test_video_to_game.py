"""Windowed conversion and window helper tests."""

import pytest

from conftest import utc
from grnkdb.config import ConfigError
from grnkdb.converter.video_to_game import VideoToGameConverter
from grnkdb.utils.windowing import sliding_windows

MINECRAFT_TITLES = [
    "Let's Play Minecraft #001 [Deutsch] [HD] - Alles auf Anfang",
    "Let's Play Minecraft #002 [Deutsch] [HD] - Inselkoller & Nachtwache",
    "Let's Play Minecraft #003 [Deutsch] [HD] - Majestätische Landschaften",
]


class TestWindows:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (1, [[1], [2], [3]]),
            (2, [[1, 2], [3]]),
            (3, [[1, 2, 3]]),
            (5, [[1, 2, 3]]),
        ],
    )
    def test_non_overlapping_windows(self, size, expected):
        assert [list(window) for window in sliding_windows([1, 2, 3], size, size)] == expected

    def test_sliding_windows_overlap(self):
        assert [list(window) for window in sliding_windows([1, 2, 3, 4], 2, 1)] == [[1, 2], [2, 3], [3, 4], [4]]

    def test_empty_sequence(self):
        assert list(sliding_windows([], 3, 1)) == []

    @pytest.mark.parametrize(("size", "step"), [(0, 1), (1, 0), (-1, 1)])
    def test_invalid_parameters(self, size, step):
        with pytest.raises(ValueError):
            list(sliding_windows([1], size, step))


class TestVideoToGameConverter:
    """Windowed conversion of upload histories"""

    def test_default_step_is_half_window(self):
        assert VideoToGameConverter(window_size=100).window_step == 50
        assert VideoToGameConverter(window_size=1).window_step == 1

    @pytest.mark.parametrize(("size", "step"), [(0, None), (10, 0), (10, 11)])
    def test_invalid_window_configuration(self, size, step):
        with pytest.raises(ConfigError):
            VideoToGameConverter(window_size=size, window_step=step)

    def test_empty_input(self):
        assert VideoToGameConverter().convert([]) == []

    def test_prefix_scenario(self, daily_videos):
        games = VideoToGameConverter(window_size=100).convert(daily_videos(MINECRAFT_TITLES))

        assert len(games) == 1
        assert games[0].name == "Minecraft"
        assert [(entry.source, entry.start) for entry in games[0].content] == [
            ("youtube", utc(2010, 10, 19, 19, 0, 17))
        ]

    def test_store_scenario(self, make_video, fake_resolver):
        resolver = fake_resolver({"2677660": "Indiana Jones and the Great Circle"})
        video = make_video(
            "Der Mann mit dem Hut ist wieder da! 🛕 INDIANA JONES AND THE GREAT CIRCLE #01",
            published_at=utc(2025, 12, 13, 19, 0, 17),
            description="https://store.steampowered.com/app/2677660",
        )

        games = VideoToGameConverter(resolver).convert([video])

        assert [game.name for game in games] == ["Indiana Jones And The Great Circle"]
        assert games[0].content[0].start == utc(2025, 12, 13, 19, 0, 17)

    def test_windows_are_folded_with_earliest_entry(self, daily_videos):
        videos = daily_videos(["Portal", "Portal", "Portal", "Portal"])

        games = VideoToGameConverter(window_size=2, window_step=2).convert(videos)

        assert [game.name for game in games] == ["Portal"]
        assert games[0].content[0].start == videos[0].published_at

    def test_input_not_modified(self, daily_videos):
        videos = daily_videos(MINECRAFT_TITLES)

        VideoToGameConverter().convert(videos)

        assert videos[0].title == MINECRAFT_TITLES[0]


def test_store_name_keeps_hyphenated_words(make_video, fake_resolver):
    video = make_video("Let's Play Half Life 2 #01", description="https://store.steampowered.com/app/220/")

    games = VideoToGameConverter(fake_resolver({"220": "Half-Life 2"})).convert([video])

    assert [game.name for game in games] == ["Half-Life 2"]
