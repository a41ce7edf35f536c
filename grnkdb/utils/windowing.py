"""Slicing helpers for walking sequences in overlapping chunks."""

from __future__ import annotations

from typing import Iterator, Sequence, TypeVar

T = TypeVar("T")


def sliding_windows(items: Sequence[T], size: int, step: int) -> Iterator[Sequence[T]]:
    """Yield ``items[i:i + size]`` for ``i = 0, step, 2 * step, ...``.

    Windows near the end may be shorter than ``size``.
    """
    if size < 1 or step < 1:
        raise ValueError(f"window size and step must be positive, got size={size} step={step}")
    for start in range(0, len(items), step):
        yield items[start : start + size]
