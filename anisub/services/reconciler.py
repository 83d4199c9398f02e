"""Decide whether a catalog title and a subtitle-index entry are the same show.

AniList ID equality is authoritative. Titles without an AniList mapping can
fall back to a case-insensitive substring check on the entry names; that
check has no scoring, so the first entry in response order wins and short
titles can match unrelated shows.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from anisub.models import ResolvedEpisode, SourceRecord, SubtitleIndexEntry
from anisub.services.jimaku import JimakuClient, subtitle_url_for

log = logging.getLogger("anisub.reconciler")


class IdentifierMatcher(Protocol):
    name: str

    def match(self, record: SourceRecord, entries: Sequence[SubtitleIndexEntry]) -> Optional[SubtitleIndexEntry]:
        ...


class ExactIdMatcher:
    name = "exact-id"

    def match(self, record: SourceRecord, entries: Sequence[SubtitleIndexEntry]) -> Optional[SubtitleIndexEntry]:
        if record.external_id is None:
            return None
        for entry in entries:
            if entry.external_id == record.external_id:
                return entry
        return None


class SubstringTitleMatcher:
    """Fallback for records without an AniList ID."""

    name = "title-substring"

    def match(self, record: SourceRecord, entries: Sequence[SubtitleIndexEntry]) -> Optional[SubtitleIndexEntry]:
        if record.external_id is not None:
            return None
        title = (record.title or "").strip().lower()
        if not title:
            return None
        for entry in entries:
            for candidate in entry.names:
                candidate = candidate.strip().lower()
                if candidate and (title in candidate or candidate in title):
                    return entry
        return None


DEFAULT_MATCHERS = (ExactIdMatcher(), SubstringTitleMatcher())


class IdentifierReconciler:
    def __init__(
        self,
        index: JimakuClient,
        matchers: Optional[Iterable[IdentifierMatcher]] = None,
        enable_title_fallback: bool = True,
    ) -> None:
        self.index = index
        chain: List[IdentifierMatcher] = list(matchers) if matchers is not None else list(DEFAULT_MATCHERS)
        if not enable_title_fallback:
            chain = [m for m in chain if m.name == ExactIdMatcher.name]
        self.matchers = chain

    @property
    def title_fallback_enabled(self) -> bool:
        return any(m.name != ExactIdMatcher.name for m in self.matchers)

    def match(self, record: SourceRecord, entries: Sequence[SubtitleIndexEntry]) -> Optional[SubtitleIndexEntry]:
        for matcher in self.matchers:
            entry = matcher.match(record, entries)
            if entry is not None:
                log.debug("%r matched entry %s via %s", record.title, entry.entry_id, matcher.name)
                return entry
        return None

    def has_subtitles(self, record: SourceRecord, entries: Sequence[SubtitleIndexEntry]) -> bool:
        return self.match(record, entries) is not None

    async def resolve_entry(self, record: SourceRecord) -> Optional[SubtitleIndexEntry]:
        if record.external_id is not None:
            # The anilist_id-filtered search is itself the membership test.
            entries = await self.index.list_entries(external_id=record.external_id)
        elif self.title_fallback_enabled and record.title:
            entries = await self.index.list_entries(query=record.title)
        else:
            return None
        return self.match(record, entries)

    async def resolve_episodes(self, record: SourceRecord) -> List[ResolvedEpisode]:
        entry = await self.resolve_entry(record)
        if entry is None:
            log.info("No subtitle index entry for %r (anilist_id=%s)", record.title, record.external_id)
            return []
        return await self.index.list_entry_episodes(entry)

    async def subtitle_url(self, record: SourceRecord, episode_number: int) -> Optional[str]:
        episodes = await self.resolve_episodes(record)
        if not episodes:
            return None
        return subtitle_url_for(episodes, episode_number)


__all__ = [
    "IdentifierMatcher",
    "ExactIdMatcher",
    "SubstringTitleMatcher",
    "IdentifierReconciler",
    "DEFAULT_MATCHERS",
]
