"""Video-to-game conversion: title cleanup, clustering and windowed folding."""

from __future__ import annotations

from typing import Protocol, Sequence

from ..models import Game, VideoRecord


class Converter(Protocol):
    """Turns scraped video metadata into catalog games."""

    def convert(self, videos: Sequence[VideoRecord]) -> list[Game]: ...


__all__ = ["Converter"]
