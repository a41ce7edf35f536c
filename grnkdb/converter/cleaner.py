"""Title cleanup rules that reduce video titles to comparable strings."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from ..models import VideoRecord


@dataclass(frozen=True, slots=True)
class Cleaner:
    """A single cleanup step.

    ``pattern`` selects the noise to remove. Without ``replace`` every match is
    deleted; with ``replace`` the whole string is handed to the function. A
    pattern that does not match leaves the string untouched.
    """

    pattern: re.Pattern[str] | None = None
    replace: Callable[[str], str] | None = None

    def process(self, text: str) -> str:
        if self.pattern is not None and not self.pattern.search(text):
            return text
        if self.replace is not None:
            return self.replace(text)
        if self.pattern is None:
            return text
        return self.pattern.sub("", text)


def _noise(pattern: str) -> Cleaner:
    return Cleaner(pattern=re.compile(pattern, re.IGNORECASE))


EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\u2600-\u27BF"
    "\u2B00-\u2BFF"
    "\uFE0F\u200D"
    "]"
)
WHITESPACE_RE = re.compile(r"\s+")

CLEANUPS: tuple[Cleaner, ...] = (
    # Common tags.
    _noise(r"Let's (?:Play|Test)"),
    _noise(r"\(?Ende\)?"),
    _noise(r"\(?Demo\)?"),
    _noise(r"\(?Angespielt\)?"),
    _noise(r"\(?Preview\)?"),
    _noise(r"\(LPT[^)]*\)"),
    _noise(r"M\.?e\.?t\.?t\.?"),
    # Episode numbers.
    _noise(r"#\d+"),
    _noise(r"\D\d\d\d:"),
    _noise(r"\d+/\d+"),
    _noise(r"Folge\s+\d+"),
    _noise(r"S\d+E\d+"),
    # Anything in square brackets.
    _noise(r"\[[^\[]*\]"),
    # Everything but letters, digits, whitespace and colons.
    _noise(r"[^\w\s:]+|_+"),
    Cleaner(replace=lambda text: EMOJI_RE.sub(" ", text)),
    Cleaner(replace=lambda text: WHITESPACE_RE.sub(" ", text)),
)


def _apply(text: str, cleanups: Iterable[Cleaner]) -> str:
    for cleaner in cleanups:
        text = cleaner.process(text)
    return text


def normalize(title: str) -> str:
    """Strip episode markers, tags, punctuation and emoji from a title.

    Removing characters can join fragments into new noise (``S01.E02``
    becomes ``S01E02``), so the pipeline is repeated until the title no
    longer changes.
    """
    cleaned = _apply(title, CLEANUPS)
    while cleaned != title:
        title, cleaned = cleaned, _apply(cleaned, CLEANUPS)
    return cleaned


def clean_videos(videos: Iterable[VideoRecord]) -> list[VideoRecord]:
    """Return copies of ``videos`` with normalized titles."""
    return [replace(video, title=normalize(video.title)) for video in videos]
