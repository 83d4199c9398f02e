"""Infer episode numbers from subtitle filenames.

Matchers run from strictest to loosest and the first one that matches wins.
The bare-digit tier also catches resolutions, release-group numbers and
dates, so it only runs when an explicit token is absent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from anisub.models import ResolvedEpisode, SubtitleFile

log = logging.getLogger("anisub.episode_numbers")


@dataclass(frozen=True)
class EpisodeMatcher:
    name: str
    pattern: Pattern[str]

    def match(self, filename: str) -> Optional[int]:
        found = self.pattern.search(filename)
        if not found:
            return None
        group = next((g for g in found.groups() if g), None)
        if group is None:
            return None
        return int(group)


EPISODE_MATCHERS = (
    EpisodeMatcher("explicit", re.compile(r"(?<![a-z])ep(?:isode)?[\s._-]*(\d+)", re.IGNORECASE)),
    EpisodeMatcher("e-prefix", re.compile(r"(?<![a-z])e(\d+)", re.IGNORECASE)),
    EpisodeMatcher("bare-digits", re.compile(r"(?:^|\D)(\d+)(?:\D|$)")),
)


def resolve_episode_number(filename: str, matchers: Iterable[EpisodeMatcher] = EPISODE_MATCHERS) -> Optional[int]:
    if not filename:
        return None
    for matcher in matchers:
        number = matcher.match(filename)
        if number is not None:
            return number
    return None


def resolve_episodes(files: Iterable[SubtitleFile]) -> List[ResolvedEpisode]:
    """Map files to episodes in order, keeping the first file per number."""
    episodes: List[ResolvedEpisode] = []
    seen = set()
    for item in files:
        number = resolve_episode_number(item.filename)
        if number is None:
            log.debug("No episode number in %r", item.filename)
            continue
        if number in seen:
            continue
        seen.add(number)
        episodes.append(ResolvedEpisode(episode_number=number, subtitle_url=item.url, source_filename=item.filename))
    return episodes


__all__ = ["EpisodeMatcher", "EPISODE_MATCHERS", "resolve_episode_number", "resolve_episodes"]
