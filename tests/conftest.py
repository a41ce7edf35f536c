"""Shared fixtures for the grnkdb test suite."""

from datetime import datetime, timedelta, timezone

import pytest

from grnkdb.models import ContentEntry, Game, VideoRecord


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture
def make_video():
    """Factory for VideoRecord instances with sensible defaults."""

    def _make(title, published_at=None, video_id="vid", description="", channel_id="UC-test", source="youtube"):
        return VideoRecord(
            video_id=video_id,
            title=title,
            description=description,
            link=f"https://www.youtube.com/watch?v={video_id}",
            published_at=published_at or utc(2020, 1, 1),
            channel_id=channel_id,
            source=source,
        )

    return _make


@pytest.fixture
def daily_videos(make_video):
    """Factory for a run of uploads published on consecutive days."""

    def _make(titles, start=None):
        start = start or utc(2010, 10, 19, 19, 0, 17)
        return [
            make_video(title, published_at=start + timedelta(days=offset), video_id=f"v{offset:03d}")
            for offset, title in enumerate(titles)
        ]

    return _make


@pytest.fixture
def make_game():
    def _make(name, *entries):
        return Game(
            name=name,
            content=[ContentEntry(source=source, link=link, start=start) for source, link, start in entries],
        )

    return _make


class FakeResolver:
    """Store lookup double keyed by app ID."""

    def __init__(self, names=None, error=None):
        self.names = names or {}
        self.error = error
        self.calls = []

    def game_name(self, app_id):
        self.calls.append(app_id)
        if self.error is not None:
            raise self.error
        return self.names[app_id]


@pytest.fixture
def fake_resolver():
    return FakeResolver
