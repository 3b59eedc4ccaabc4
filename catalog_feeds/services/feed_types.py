"""
Shared dataclasses used across the feed rendering pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(slots=True)
class PlaylistEntry:
    """One #EXTINF block of the M3U playlist."""
    number: int
    id: str
    name: str
    logo: str
    group: str
    url: str


@dataclass(slots=True)
class GuideRating:
    value: str
    system: str = "MPAA"


@dataclass(slots=True)
class GuideEvent:
    """A <programme> of the XMLTV guide."""
    channel_id: str
    start: datetime
    stop: datetime
    title: str
    description: str
    category: str | None = None
    rating: GuideRating | None = None


@dataclass(slots=True)
class GuideChannel:
    """A <channel> of the XMLTV guide."""
    id: str
    display_name: str
    url: str
    icon_url: str | None = None
    lang: str = "en"


@dataclass(slots=True)
class GuideDocument:
    """Everything the <tv> root carries."""
    generated_on: date
    generator_info_name: str
    source_info_name: str
    channels: list[GuideChannel] = field(default_factory=list)
    programmes: list[GuideEvent] = field(default_factory=list)


__all__ = ["PlaylistEntry", "GuideRating", "GuideEvent", "GuideChannel", "GuideDocument"]
