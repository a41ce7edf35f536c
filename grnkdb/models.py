"""Core records: scraped videos, catalog games and the catalog merge."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import groupby
from operator import attrgetter
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

SOURCE_YOUTUBE = "youtube"
SOURCE_TWITCH = "twitch"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp into UTC, or return ``None`` if it is not one."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class VideoRecord:
    """One uploaded video as reported by a video source."""

    video_id: str
    title: str
    description: str
    link: str
    published_at: datetime
    channel_id: str
    source: str = SOURCE_YOUTUBE


class ContentEntry(BaseModel):
    """Earliest known appearance of a game on one platform."""

    model_config = ConfigDict(frozen=True)

    source: str
    link: str
    start: datetime

    @field_validator("start", mode="after")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Game(BaseModel):
    """A catalog entry: display name plus at most one content entry per source."""

    name: str
    content: list[ContentEntry] = Field(default_factory=list)

    def sorted_copy(self) -> "Game":
        return Game(name=self.name, content=sorted(self.content, key=attrgetter("source")))


def sort_games(games: Iterable[Game]) -> list[Game]:
    """Return games ordered by name with their content ordered by source."""
    return [game.sorted_copy() for game in sorted(games, key=attrgetter("name"))]


def merge_games(a: Iterable[Game], b: Iterable[Game]) -> list[Game]:
    """Merge two game lists into one, deduplicating by name and source.

    Games with an identical name are folded into one game. Within a game only
    the earliest entry per source survives; on equal timestamps the entry seen
    first (``a`` before ``b``) wins. Neither input is modified.
    """
    combined = sorted([*a, *b], key=attrgetter("name"))
    merged: list[Game] = []
    for name, group in groupby(combined, key=attrgetter("name")):
        entries = [entry for game in group for entry in game.content]
        merged.append(Game(name=name, content=_earliest_per_source(entries)))
    return merged


def _earliest_per_source(entries: list[ContentEntry]) -> list[ContentEntry]:
    ordered = sorted(entries, key=attrgetter("source"))
    # min() keeps the first of several equal timestamps.
    return [min(group, key=attrgetter("start")) for _, group in groupby(ordered, key=attrgetter("source"))]
