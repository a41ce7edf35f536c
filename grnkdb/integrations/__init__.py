"""Interfaces to the remote services the catalog builder consumes."""

from __future__ import annotations

from typing import Protocol

from ..models import VideoRecord


class VideoSource(Protocol):
    """Lists every uploaded video of one channel."""

    def videos(self, channel_id: str) -> list[VideoRecord]: ...


class TitleResolver(Protocol):
    """Turns a store ID into an authoritative game name."""

    def game_name(self, app_id: str) -> str: ...


class TitleLookupError(RuntimeError):
    """A store ID could not be resolved; callers fall back to title matching."""


__all__ = ["TitleLookupError", "TitleResolver", "VideoSource"]
