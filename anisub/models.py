"""Request-scoped records exchanged between the catalog and the subtitle index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class SourceRecord:
    """One title as listed by the source catalog."""

    title: str
    poster_image: str
    catalog_link: str
    external_id: Optional[int] = None


@dataclass(frozen=True)
class SubtitleIndexEntry:
    """One title in the subtitle index."""

    entry_id: str
    name: str
    english_name: Optional[str] = None
    japanese_name: Optional[str] = None
    external_id: Optional[int] = None

    @property
    def names(self) -> tuple:
        return tuple(n for n in (self.english_name, self.name, self.japanese_name) if n)


@dataclass(frozen=True)
class SubtitleFile:
    filename: str
    url: str


@dataclass(frozen=True)
class ResolvedEpisode:
    episode_number: int
    subtitle_url: str
    source_filename: str


@dataclass(frozen=True)
class ReconciledEpisode:
    href: str
    number: int

    def to_dict(self) -> Dict[str, object]:
        return {"href": self.href, "number": self.number}


@dataclass(frozen=True)
class SearchResult:
    title: str
    image: str
    href: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "image": self.image, "href": self.href}


@dataclass(frozen=True)
class TitleDetails:
    description: str
    aliases: str
    airdate: str

    def to_dict(self) -> Dict[str, str]:
        return {"description": self.description, "aliases": self.aliases, "airdate": self.airdate}


@dataclass(frozen=True)
class StreamResolution:
    stream_url: Optional[str] = None
    subtitle_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"stream": self.stream_url, "subtitles": self.subtitle_url}


__all__ = [
    "SourceRecord",
    "SubtitleIndexEntry",
    "SubtitleFile",
    "ResolvedEpisode",
    "ReconciledEpisode",
    "SearchResult",
    "TitleDetails",
    "StreamResolution",
]
