"""Windowed conversion of a channel's upload history into games."""

from __future__ import annotations

import logging
from typing import Sequence

from ..config import ConfigError
from ..integrations import TitleResolver
from ..models import Game, VideoRecord, merge_games
from ..utils.windowing import sliding_windows
from .cleaner import clean_videos
from .clusterer import TitleClusterer

logger = logging.getLogger(__name__)


class VideoToGameConverter:
    """Clusters videos window by window and folds the results into one game list.

    Uploads of one game are mostly contiguous, so clustering only looks at
    ``window_size`` neighbouring videos at a time. Windows advance by
    ``window_step`` (half a window unless given) so a run of videos split by
    one window boundary is seen whole by the next window.
    """

    def __init__(
        self,
        resolver: TitleResolver | None = None,
        *,
        window_size: int = 100,
        window_step: int | None = None,
    ) -> None:
        if window_size < 1:
            raise ConfigError(f"window size must be positive, got {window_size}")
        step = window_step if window_step is not None else max(1, window_size // 2)
        if not 1 <= step <= window_size:
            raise ConfigError(f"window step must be between 1 and {window_size}, got {step}")
        self.window_size = window_size
        self.window_step = step
        self.clusterer = TitleClusterer(resolver)

    def convert(self, videos: Sequence[VideoRecord]) -> list[Game]:
        """Return the games found in ``videos``, sorted by name."""
        logger.debug("Cleaning up video metadata")
        cleaned = clean_videos(videos)

        logger.info(
            "Converting %d videos to games (window %d, step %d)",
            len(cleaned),
            self.window_size,
            self.window_step,
        )
        games: list[Game] = []
        for index, window in enumerate(sliding_windows(cleaned, self.window_size, self.window_step), start=1):
            found = self.clusterer.games(window)
            logger.debug("Window %d: %d videos, %d games", index, len(window), len(found))
            games = merge_games(games, found)
        return games
