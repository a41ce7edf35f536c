"""The persisted game catalog (JSON)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from ..models import Game, sort_games

logger = logging.getLogger(__name__)

GAMES_ADAPTER = TypeAdapter(list[Game])


class CatalogError(RuntimeError):
    """Raised when the catalog file cannot be read or written."""


def read_catalog(path: Path) -> list[Game]:
    """Load the catalog at ``path``; games come back sorted by name."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise CatalogError(f"cannot read catalog {path}: {exc}") from exc
    try:
        games = GAMES_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise CatalogError(f"invalid catalog {path}: {exc}") from exc
    logger.info("Loaded %d games from %s", len(games), path)
    return sort_games(games)


def dump_catalog(games: Iterable[Game]) -> bytes:
    return GAMES_ADAPTER.dump_json(sort_games(games), indent=2) + b"\n"


def write_catalog(path: Path, games: Iterable[Game]) -> None:
    """Write ``games`` sorted to ``path``, replacing the file atomically."""
    payload = dump_catalog(games)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_bytes(payload)
        tmp_path.replace(path)
    except OSError as exc:
        raise CatalogError(f"cannot write catalog {path}: {exc}") from exc
    logger.info("Catalog written: %s", path)
