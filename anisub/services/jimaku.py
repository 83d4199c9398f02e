"""Jimaku subtitle index client.

Entries are looked up by AniList ID or by a free-text query; each entry lists
its subtitle files. Every call degrades to an empty value, so callers read an
empty list as "no subtitles available".

The pipeline goes through ``IdentifierReconciler`` and uses ``list_entries`` and
``list_entry_episodes``. ``list_titles_with_subtitles``, ``find_entry``,
``list_episodes`` and ``get_subtitle_url`` are the standalone client API for
callers that hold an AniList ID or a title and want no matching policy.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

import httpx

from anisub.models import ResolvedEpisode, SubtitleFile, SubtitleIndexEntry
from anisub.services.episode_numbers import resolve_episodes
from anisub.services.http import fetch_json
from anisub.services.state_extractor import parse_int

log = logging.getLogger("anisub.jimaku")

DEFAULT_API_BASE = "https://jimaku.app/api"


def _entry_from_payload(raw: Any) -> Optional[SubtitleIndexEntry]:
    if not isinstance(raw, dict):
        return None
    entry_id = raw.get("id")
    if entry_id is None or entry_id == "":
        return None
    return SubtitleIndexEntry(
        entry_id=str(entry_id),
        name=str(raw.get("name") or ""),
        english_name=raw.get("english_name") or None,
        japanese_name=raw.get("japanese_name") or None,
        external_id=parse_int(raw.get("anilist_id")),
    )


class JimakuClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_base: str = DEFAULT_API_BASE,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": self.api_key, "Accept": "application/json"}

    async def _search(self, params: Dict[str, str]) -> List[Any]:
        payload = await fetch_json(
            self.client,
            f"{self.api_base}/entries/search",
            headers=self._headers(),
            params=params,
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            log.warning("Jimaku search did not return an array (params=%s)", params)
            return []
        return payload

    async def list_entries(
        self,
        external_id: Optional[int] = None,
        query: Optional[str] = None,
    ) -> List[SubtitleIndexEntry]:
        params: Dict[str, str] = {"anime": "true"}
        if external_id is not None:
            params["anilist_id"] = str(external_id)
        if query:
            params["query"] = query

        entries = []
        for raw in await self._search(params):
            entry = _entry_from_payload(raw)
            if entry is not None:
                entries.append(entry)
        return entries

    async def list_titles_with_subtitles(self) -> Set[int]:
        # Entries without an id still count: only the AniList ID is needed here.
        ids = set()
        for raw in await self._search({"anime": "true"}):
            if not isinstance(raw, dict):
                continue
            anilist_id = parse_int(raw.get("anilist_id"))
            if anilist_id is not None:
                ids.add(anilist_id)
        log.info("Jimaku lists %s anime with AniList IDs", len(ids))
        return ids

    async def find_entry(
        self,
        external_id: Optional[Any] = None,
        query: Optional[str] = None,
    ) -> Optional[SubtitleIndexEntry]:
        anilist_id = parse_int(external_id)
        if anilist_id is not None:
            entries = await self.list_entries(external_id=anilist_id)
        elif query and query.strip():
            entries = await self.list_entries(query=query.strip())
        else:
            log.debug("No usable identifier to look up in Jimaku")
            return None

        if not entries:
            log.info("No Jimaku entry for anilist_id=%s query=%r", anilist_id, query)
            return None
        return entries[0]

    async def list_files(self, entry_id: str) -> List[SubtitleFile]:
        if not entry_id:
            return []
        payload = await fetch_json(
            self.client,
            f"{self.api_base}/entries/{entry_id}/files",
            headers=self._headers(),
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            log.warning("Files response is not an array for entry %s", entry_id)
            return []

        files = []
        for raw in payload:
            if not isinstance(raw, dict) or not raw.get("name") or not raw.get("url"):
                log.debug("Skipping file with missing data in entry %s", entry_id)
                continue
            files.append(SubtitleFile(filename=str(raw["name"]), url=str(raw["url"])))
        return files

    async def list_entry_episodes(self, entry: SubtitleIndexEntry) -> List[ResolvedEpisode]:
        files = await self.list_files(entry.entry_id)
        episodes = resolve_episodes(files)
        log.info("Entry %s has %s episodes with subtitles (%s files)", entry.entry_id, len(episodes), len(files))
        return episodes

    async def list_episodes(
        self,
        external_id: Optional[Any] = None,
        query: Optional[str] = None,
    ) -> List[ResolvedEpisode]:
        entry = await self.find_entry(external_id=external_id, query=query)
        if entry is None:
            return []
        return await self.list_entry_episodes(entry)

    async def get_subtitle_url(
        self,
        external_id: Optional[Any],
        episode_number: Any,
        query: Optional[str] = None,
    ) -> Optional[str]:
        number = parse_int(episode_number)
        if number is None:
            log.debug("Invalid episode number %r", episode_number)
            return None
        episodes = await self.list_episodes(external_id=external_id, query=query)
        return subtitle_url_for(episodes, number)


def subtitle_url_for(episodes: List[ResolvedEpisode], episode_number: int) -> Optional[str]:
    for episode in episodes:
        if episode.episode_number == episode_number:
            return episode.subtitle_url
    log.info("No subtitle found for episode %s", episode_number)
    return None


__all__ = ["JimakuClient", "subtitle_url_for"]
