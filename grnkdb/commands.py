"""Units of work behind the command line: scrape, convert, export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .converter import Converter
from .integrations import VideoSource
from .models import Game, VideoRecord, merge_games
from .storage.csv_io import read_videos_csv, write_games_csv, write_videos_csv
from .storage.json_catalog import read_catalog, write_catalog

logger = logging.getLogger(__name__)


class ChannelScrapeError(RuntimeError):
    """Failure of a single channel during a scrape run."""

    def __init__(self, channel_id: str, action: str, cause: Exception) -> None:
        super().__init__(f"failed to {action} for channel {channel_id}: {cause}")
        self.channel_id = channel_id
        self.__cause__ = cause


class ScrapeError(RuntimeError):
    """One or more channels could not be scraped; the rest were written."""

    def __init__(self, failures: Sequence[Exception]) -> None:
        self.failures = list(failures)
        details = "; ".join(str(failure) for failure in self.failures)
        super().__init__(f"encountered {len(self.failures)} errors: {details}")


def scrape_youtube(source: VideoSource, output_dir: Path, channel_ids: Sequence[str]) -> dict[str, Path]:
    """Dump the videos of every channel into ``<output_dir>/<channel>.csv``.

    A failing channel does not stop the others. All failures are raised
    together as :class:`ScrapeError` once every channel was attempted.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: dict[str, Path] = {}
    failures: list[ChannelScrapeError] = []
    for channel_id in channel_ids:
        logger.info("Scraping channel %s", channel_id)
        try:
            videos = source.videos(channel_id)
        except Exception as exc:
            logger.error("Channel scraping failed for %s: %s", channel_id, exc)
            failures.append(ChannelScrapeError(channel_id, "fetch videos", exc))
            continue

        output_file = output_dir / f"{channel_id}.csv"
        try:
            write_videos_csv(output_file, videos)
        except OSError as exc:
            logger.error("CSV writing failed for %s: %s", channel_id, exc)
            failures.append(ChannelScrapeError(channel_id, "write CSV", exc))
            continue
        written[channel_id] = output_file
        logger.info("Wrote %s with %d videos", output_file, len(videos))

    if failures:
        raise ScrapeError(failures)
    return written


def load_videos(input_dir: Path) -> list[VideoRecord]:
    videos: list[VideoRecord] = []
    for csv_file in sorted(input_dir.glob("*.csv")):
        loaded = read_videos_csv(csv_file)
        logger.debug("Loaded %d videos from %s", len(loaded), csv_file.name)
        videos.extend(loaded)
    return videos


def convert_csv_to_games(converter: Converter, input_dir: Path, output_path: Path) -> list[Game] | None:
    """Convert all video dumps in ``input_dir`` and fold them into the catalog at ``output_path``.

    Returns the written catalog, or ``None`` if there was nothing to convert.
    """
    if not any(input_dir.glob("*.csv")):
        logger.warning("No CSV files found in %s", input_dir)
        return None

    videos = load_videos(input_dir)
    if not videos:
        logger.warning("No videos found in CSV files of %s", input_dir)
        return None

    logger.info("Converting %d videos to games", len(videos))
    games = converter.convert(videos)
    logger.info("Conversion produced %d games", len(games))

    if output_path.exists():
        existing = read_catalog(output_path)
        games = merge_games(existing, games)
        logger.info("Merged with %d existing games into %d games", len(existing), len(games))

    write_catalog(output_path, games)
    return games


def export_games_csv(catalog_path: Path, csv_path: Path, known_sources: Sequence[str]) -> int:
    """Render the JSON catalog as the CSV game table; returns the number of games."""
    games = read_catalog(catalog_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    write_games_csv(csv_path, games, known_sources)
    logger.info("Exported %d games to %s", len(games), csv_path)
    return len(games)
