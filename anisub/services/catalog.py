"""AnimeParadise page state: URL building and record parsing."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from anisub.constants import ANIME_PATH, SEARCH_PATH, WATCH_PATH
from anisub.models import SourceRecord, TitleDetails
from anisub.services.state_extractor import dig, parse_int

log = logging.getLogger("anisub.catalog")


class CatalogPages:
    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def search_url(self, keyword: str) -> str:
        return f"{self.base_url}{SEARCH_PATH}?q={quote(keyword, safe='')}"

    def anime_url(self, link: str) -> str:
        return f"{self.base_url}{ANIME_PATH}{link}"

    def watch_url(self, episode_uid: str, origin: str) -> str:
        return f"{self.base_url}{WATCH_PATH}{episode_uid}?origin={origin}"


def page_data(state: Any) -> Optional[Any]:
    return dig(state, "props", "pageProps", "data")


def poster_url(poster: Any) -> Optional[str]:
    if isinstance(poster, dict):
        value = poster.get("original") or poster.get("large") or poster.get("medium")
        return str(value) if value else None
    if isinstance(poster, str) and poster:
        return poster
    return None


def parse_source_record(entry: Any) -> Optional[SourceRecord]:
    if not isinstance(entry, dict):
        return None
    title = entry.get("title")
    poster = poster_url(entry.get("posterImage"))
    link = entry.get("link")
    if not title or not poster or not link:
        log.debug("Skipping catalog entry missing required properties: %r", title)
        return None
    return SourceRecord(
        title=str(title),
        poster_image=poster,
        catalog_link=str(link),
        external_id=parse_int(dig(entry, "mappings", "anilist")),
    )


def parse_search_records(state: Any) -> List[SourceRecord]:
    data = page_data(state)
    if data is None:
        log.warning("Search page state has no props.pageProps.data")
        return []
    if not isinstance(data, list):
        data = [data]
    records = []
    for entry in data:
        record = parse_source_record(entry)
        if record is not None:
            records.append(record)
    return records


def parse_title_details(state: Any, max_aliases: int = 5) -> Optional[TitleDetails]:
    data = page_data(state)
    if not isinstance(data, dict):
        return None
    synonyms = data.get("synonyms") or []
    if not isinstance(synonyms, list):
        synonyms = []
    aliases = ", ".join(str(s) for s in synonyms[:max_aliases] if s)
    season = dig(data, "animeSeason", "season") or "Unknown"
    year = dig(data, "animeSeason", "year") or ""
    return TitleDetails(
        description=data.get("synopsys") or "No description available",
        aliases=aliases or "No aliases available",
        airdate=f"{season} {year}",
    )


def title_record(data: Dict[str, Any]) -> SourceRecord:
    """Record for a title page, where poster and link may be absent."""
    return SourceRecord(
        title=str(data.get("title") or ""),
        poster_image=poster_url(data.get("posterImage")) or "",
        catalog_link=str(data.get("link") or ""),
        external_id=parse_int(dig(data, "mappings", "anilist")),
    )


__all__ = [
    "CatalogPages",
    "page_data",
    "parse_search_records",
    "parse_source_record",
    "parse_title_details",
    "poster_url",
    "title_record",
]
