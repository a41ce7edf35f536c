"""CSV files: per-channel video dumps and the human readable game table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from ..config import ConfigError
from ..models import ContentEntry, Game, VideoRecord, parse_timestamp, sort_games

logger = logging.getLogger(__name__)

VIDEO_COLUMNS: tuple[str, ...] = ("Link", "PublishedAt", "Title", "Description", "ChannelID", "VideoID", "Source")
GAME_TITLE_COLUMN = "titel"
GAME_DATE_FORMAT = "%d.%m.%Y"


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def write_videos_csv(path: Path, videos: Iterable[VideoRecord]) -> None:
    rows = [
        {
            "Link": video.link,
            "PublishedAt": _format_timestamp(video.published_at),
            "Title": video.title,
            "Description": video.description,
            "ChannelID": video.channel_id,
            "VideoID": video.video_id,
            "Source": video.source,
        }
        for video in videos
    ]
    pd.DataFrame(rows, columns=list(VIDEO_COLUMNS)).to_csv(path, index=False)


def read_videos_csv(path: Path) -> list[VideoRecord]:
    """Read a video dump; rows with an unparseable publish date are skipped."""
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        logger.warning("Video CSV %s is empty", path)
        return []

    missing = [column for column in VIDEO_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"video CSV {path} lacks columns: {', '.join(missing)}")

    videos: list[VideoRecord] = []
    for row in frame.to_dict("records"):
        published_at = parse_timestamp(row["PublishedAt"])
        if published_at is None:
            logger.warning("Skipping video %s in %s: unparseable publish date %r", row["VideoID"], path, row["PublishedAt"])
            continue
        videos.append(
            VideoRecord(
                video_id=row["VideoID"],
                title=row["Title"],
                description=row["Description"],
                link=row["Link"],
                published_at=published_at,
                channel_id=row["ChannelID"],
                source=row["Source"],
            )
        )
    return videos


def games_csv_header(known_sources: Sequence[str]) -> list[str]:
    header = [GAME_TITLE_COLUMN]
    for source in known_sources:
        header.extend((f"{source}-link", f"{source}-start"))
    return header


def write_games_csv(path, games: Iterable[Game], known_sources: Sequence[str]) -> None:
    """Write the game table with one link/start column pair per known source.

    ``path`` may be anything ``DataFrame.to_csv`` accepts.
    """
    if not known_sources:
        raise ConfigError("at least one known source type is required to write the game table")

    rows = []
    for game in sort_games(games):
        row = {GAME_TITLE_COLUMN: game.name}
        for entry in game.content:
            if entry.source not in known_sources:
                raise ValueError(f"unknown source type {entry.source!r} in game {game.name!r}")
            row[f"{entry.source}-link"] = entry.link
            row[f"{entry.source}-start"] = entry.start.strftime(GAME_DATE_FORMAT)
        rows.append(row)
    pd.DataFrame(rows, columns=games_csv_header(known_sources)).to_csv(path, index=False)


def read_games_csv(path, known_sources: Sequence[str]) -> list[Game]:
    """Read a game table written by :func:`write_games_csv`."""
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        raise ValueError("empty CSV data") from exc

    columns = list(frame.columns)
    if not columns or columns[0] != GAME_TITLE_COLUMN:
        raise ValueError(f"game CSV must start with a {GAME_TITLE_COLUMN!r} column")
    sources = []
    for column in columns[1::2]:
        source = column.split("-", 1)[0]
        if source not in known_sources:
            raise ValueError(f"unknown source type {source!r}")
        sources.append(source)

    games = []
    for row in frame.to_dict("records"):
        content = []
        for source in sources:
            link = row.get(f"{source}-link", "")
            start = row.get(f"{source}-start", "")
            if not link and not start:
                continue
            try:
                started = datetime.strptime(start, GAME_DATE_FORMAT).replace(tzinfo=timezone.utc)
            except ValueError:
                logger.warning("Skipping %s entry of %r: unparseable start %r", source, row[GAME_TITLE_COLUMN], start)
                continue
            content.append(ContentEntry(source=source, link=link, start=started))
        games.append(Game(name=row[GAME_TITLE_COLUMN], content=content))
    return sort_games(games)
