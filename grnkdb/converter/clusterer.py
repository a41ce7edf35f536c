"""Groups cleaned videos into games by shared title prefixes and suffixes."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..integrations import TitleLookupError, TitleResolver
from ..models import ContentEntry, Game, VideoRecord, merge_games

logger = logging.getLogger(__name__)

STEAM_STORE_LINK_RE = re.compile(r"steampowered\.com/app/(\d+)")

# Overlaps made only of one of these words never identify a game.
COMMON_WORDS: frozenset[str] = frozenset({"alles", "der", "die", "das", "ein", "the", "gronkh"})

MIN_SPECIFIER_LENGTH = 3
NAME_TRIM_CHARS = '-:" \t'
# Title-casing starts a new word after each of these.
WORD_BREAK_RE = re.compile(r"([\s\-/])")


def longest_common_prefix(first: str, second: str) -> str:
    """Return the common prefix of two strings.

    When the strings diverge the last shared character is dropped as well, so
    a shared word stem such as "gol" in "golang"/"golem" shrinks to "go".
    """
    limit = min(len(first), len(second))
    i = 0
    while i < limit:
        if first[i] != second[i]:
            i = max(0, i - 1)
            break
        i += 1
    return first[:i]


def longest_common_suffix(first: str, second: str) -> str:
    return longest_common_prefix(first[::-1], second[::-1])[::-1]


def title_case(text: str) -> str:
    return "".join(part[:1].upper() + part[1:].lower() for part in WORD_BREAK_RE.split(text))


def game_name_from_specifier(specifier: str) -> str:
    return title_case(specifier.strip(NAME_TRIM_CHARS).strip())


def _is_common_word(candidate: str) -> bool:
    return candidate.strip().lower() in COMMON_WORDS


def _best_overlap(title: str, specifiers: Iterable[str]) -> tuple[str, str]:
    """Find the longest usable prefix or suffix ``title`` shares with a known specifier.

    Returns the overlap and the specifier it was found against, or two empty
    strings if nothing qualifies.
    """
    best = ""
    matched = ""
    lowered = title.lower()
    for specifier in specifiers:
        other = specifier.lower()
        prefix = longest_common_prefix(lowered, other)
        suffix = longest_common_suffix(lowered, other)
        if _is_common_word(prefix):
            prefix = ""
        if _is_common_word(suffix):
            suffix = ""

        if len(prefix.strip()) >= MIN_SPECIFIER_LENGTH and len(prefix) > len(best) and len(prefix) > len(suffix):
            best, matched = prefix, specifier
        elif len(suffix.strip()) >= MIN_SPECIFIER_LENGTH and len(suffix) > len(best):
            best, matched = suffix, specifier
    return best, matched


class TitleClusterer:
    """Clusters one window of cleaned videos.

    Every scan compares the incoming title against every cluster key, which is
    quadratic in the number of clusters and only viable for bounded windows.
    """

    def __init__(self, resolver: TitleResolver | None = None) -> None:
        self.resolver = resolver

    def _resolve(self, video: VideoRecord) -> str:
        if self.resolver is None:
            return ""
        match = STEAM_STORE_LINK_RE.search(video.description)
        if match is None:
            return ""
        try:
            name = self.resolver.game_name(match.group(1))
        except TitleLookupError as exc:
            logger.error("Cannot get name from store for video %s: %s", video.video_id, exc)
            return ""
        logger.debug("Found game %r on store for video %s", name, video.video_id)
        return name.lower()

    def cluster(self, videos: Iterable[VideoRecord]) -> dict[str, VideoRecord]:
        """Map each detected game specifier to the earliest video seen for it."""
        earliest: dict[str, VideoRecord] = {}
        for video in videos:
            specifier = self._resolve(video)
            previous = ""
            if not specifier:
                specifier, previous = _best_overlap(video.title, earliest)

            if not specifier:
                logger.debug("No match for %r", video.title)
                specifier = video.title
            elif previous and previous != specifier:
                # Shorten the key towards the common part.
                moved = earliest.pop(previous)
                kept = earliest.get(specifier)
                if kept is None or moved.published_at < kept.published_at:
                    earliest[specifier] = moved
            known = earliest.get(specifier)
            if known is None or video.published_at < known.published_at:
                earliest[specifier] = video
        return earliest

    def games(self, videos: Iterable[VideoRecord]) -> list[Game]:
        """Cluster ``videos`` and turn every cluster into a single-entry game."""
        games = [
            Game(
                name=game_name_from_specifier(specifier),
                content=[ContentEntry(source=video.source, link=video.link, start=video.published_at)],
            )
            for specifier, video in self.cluster(videos).items()
        ]
        # Distinct keys can still collapse to the same display name.
        return merge_games(games, [])
