"""Search, episode listing and stream resolution across both catalogs.

Every public operation is a linear chain of stages. A stage that yields
nothing short-circuits to the operation's degraded value; no exception
leaves an operation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Set

import httpx

from anisub.constants import DEGRADED_DETAILS
from anisub.models import (
    ReconciledEpisode,
    SearchResult,
    SourceRecord,
    StreamResolution,
    TitleDetails,
)
from anisub.services.catalog import (
    CatalogPages,
    page_data,
    parse_search_records,
    parse_title_details,
    title_record,
)
from anisub.services.http import fetch_text
from anisub.services.jimaku import JimakuClient
from anisub.services.reconciler import IdentifierReconciler
from anisub.services.state_extractor import dig, extract_embedded_state, parse_int
from anisub.settings import Settings, settings as default_settings

log = logging.getLogger("anisub.pipeline")


class ReconciliationPipeline:
    def __init__(
        self,
        client: httpx.AsyncClient,
        config: Optional[Settings] = None,
        index: Optional[JimakuClient] = None,
        reconciler: Optional[IdentifierReconciler] = None,
    ) -> None:
        self.client = client
        self.config = config or default_settings
        self.pages = CatalogPages(self.config.catalog_base_url)
        self.index = index or JimakuClient(
            client,
            api_key=self.config.effective_jimaku_key,
            api_base=self.config.jimaku_api_base,
        )
        self.reconciler = reconciler or IdentifierReconciler(
            self.index,
            enable_title_fallback=self.config.enable_title_fallback,
        )

    async def _page_state(self, url: str):
        html = await fetch_text(self.client, url)
        if html is None:
            return None
        return extract_embedded_state(html)

    async def search(self, keyword: str) -> List[SearchResult]:
        try:
            return await self._search(keyword)
        except Exception:
            log.exception("Search failed for %r", keyword)
            return []

    async def _search(self, keyword: str) -> List[SearchResult]:
        log.info("Searching for anime with keyword: %s", keyword)
        # Catalog page and index listing are independent; join before filtering.
        state, entries = await asyncio.gather(
            self._page_state(self.pages.search_url(keyword)),
            self.index.list_entries(),
            return_exceptions=True,
        )
        for outcome in (state, entries):
            if isinstance(outcome, Exception):
                raise outcome
        if state is None:
            return []
        if not entries:
            log.warning("Subtitle index returned no entries, nothing to cross-reference")
            return []

        records = parse_search_records(state)
        results = []
        for record in records:
            if not self.reconciler.has_subtitles(record, entries):
                continue
            results.append(
                SearchResult(
                    title=record.title,
                    image=record.poster_image,
                    href=self.pages.anime_url(record.catalog_link),
                )
            )
        log.info("Found %s of %s shows with subtitles", len(results), len(records))
        return results

    async def extract_details(self, url: str) -> TitleDetails:
        degraded = TitleDetails(**DEGRADED_DETAILS)
        try:
            state = await self._page_state(url)
            if state is None:
                return degraded
            details = parse_title_details(state, max_aliases=self.config.max_aliases)
            return details or degraded
        except Exception:
            log.exception("Details failed for %s", url)
            return degraded

    async def list_episodes(self, title_url: str) -> List[ReconciledEpisode]:
        try:
            return await self._list_episodes(title_url)
        except Exception:
            log.exception("Episode listing failed for %s", title_url)
            return []

    async def _list_episodes(self, title_url: str) -> List[ReconciledEpisode]:
        log.info("Extracting episodes from: %s", title_url)
        state = await self._page_state(title_url)
        data = page_data(state)
        if not isinstance(data, dict):
            return []

        origin = data.get("_id")
        if not origin:
            log.warning("Could not find origin ID on %s", title_url)
            return []
        fragments = data.get("ep")
        if not isinstance(fragments, list):
            log.warning("Episode list missing or not an array on %s", title_url)
            return []

        record = title_record(data)
        resolved = await self.reconciler.resolve_episodes(record)
        return reconcile_episodes(self.pages, fragments, str(origin), {ep.episode_number for ep in resolved})

    async def resolve_stream(self, episode_url: str) -> StreamResolution:
        try:
            return await self._resolve_stream(episode_url)
        except Exception:
            log.exception("Stream resolution failed for %s", episode_url)
            return StreamResolution()

    async def _resolve_stream(self, episode_url: str) -> StreamResolution:
        log.info("Extracting stream URL from: %s", episode_url)
        state = await self._page_state(episode_url)
        props = dig(state, "props", "pageProps")
        if not isinstance(props, dict):
            return StreamResolution()

        stream_url = dig(props, "episode", "streamLink")
        if not stream_url:
            log.warning("Stream URL not found in page data for %s", episode_url)
            return StreamResolution()

        episode_number = parse_int(dig(props, "episode", "number"))
        if episode_number is None:
            log.warning("Episode number not found in page data for %s", episode_url)
            return StreamResolution(stream_url=stream_url)

        anime = dig(props, "animeData")
        record = title_record(anime) if isinstance(anime, dict) else SourceRecord("", "", "")
        try:
            subtitle_url = await self.reconciler.subtitle_url(record, episode_number)
        except Exception:
            log.exception("Subtitle lookup failed for %s", episode_url)
            subtitle_url = None
        return StreamResolution(stream_url=stream_url, subtitle_url=subtitle_url)


def reconcile_episodes(
    pages: CatalogPages,
    fragments: List[object],
    origin: str,
    subtitled: Set[int],
) -> List[ReconciledEpisode]:
    """Pair 1-based episode numbers with watch URLs where subtitles exist."""
    episodes = []
    for number, fragment in enumerate(fragments, start=1):
        if number not in subtitled:
            continue
        if not fragment or not isinstance(fragment, str):
            log.debug("Episode data missing for episode %s", number)
            continue
        episodes.append(ReconciledEpisode(href=pages.watch_url(fragment, origin), number=number))
    log.info("Returning %s episodes", len(episodes))
    return episodes


__all__ = ["ReconciliationPipeline", "reconcile_episodes"]
