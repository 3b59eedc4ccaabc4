"""
XMLTV guide service

Projects channel records (and their embedded EPG events) into XMLTV channels
and programmes, and serializes the document with lxml.
"""
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
import logging
import re

from lxml import etree  # type: ignore

from catalog_feeds.exceptions import RenderError
from catalog_feeds.field_policy import FieldPolicy
from catalog_feeds.schemas import ChannelRecord
from catalog_feeds.services.feed_types import (
    GuideChannel,
    GuideDocument,
    GuideEvent,
    GuideRating,
)
from catalog_feeds.utils.xmltv_time import format_xmltv_date, format_xmltv_time


logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
DOCTYPE = '<!DOCTYPE tv SYSTEM "xmltv.dtd">\n'

PLACEHOLDER_COUNT = 3
PLACEHOLDER_LENGTH = timedelta(hours=1)
RATING_SYSTEM = "MPAA"

# Characters outside the XML 1.0 Char production
_XML_INVALID = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def project_guide(
    channels: Sequence[ChannelRecord | None],
    policy: FieldPolicy,
    generator_info_name: str,
    source_info_name: str,
    *,
    now: datetime | None = None,
    today: date | None = None
) -> GuideDocument:
    """
    Build the guide document for a decoded catalog

    Args:
        channels: Decoded catalog; None elements are skipped
        policy: Field policy selecting icon and stream URLs
        generator_info_name: Value of the generator-info-name attribute
        source_info_name: Value of the source-info-name attribute

    Keyword Args:
        now: Start of placeholder programmes (defaults to current UTC time)
        today: Document date (defaults to the local current date)

    Returns:
        GuideDocument with all channels followed by all programmes
    """
    now = now or datetime.now(timezone.utc)
    document = GuideDocument(
        generated_on=today or date.today(),
        generator_info_name=generator_info_name,
        source_info_name=source_info_name,
    )

    for channel in channels:
        if channel is None:
            continue

        icon_url = policy.select(channel, "guide_icon")
        document.channels.append(GuideChannel(
            id=channel.id,
            display_name=channel.title,
            url=policy.select(channel, "guide_stream"),
            icon_url=icon_url or None,
        ))

        if channel.epg.events:
            document.programmes.extend(_map_events(channel))
        else:
            document.programmes.extend(_placeholder_events(channel, now))

    logger.debug(
        f"Guide projected: {len(document.channels)} channels, {len(document.programmes)} programmes"
    )
    return document


def _map_events(channel: ChannelRecord) -> list[GuideEvent]:
    """Map embedded EPG events 1:1"""
    category = channel.first_category()
    programmes = []

    for event in channel.epg.events:
        rating = event.custom.rating
        programmes.append(GuideEvent(
            channel_id=channel.id,
            start=event.start,
            stop=event.end,
            title=event.title,
            description=f"Duration: {event.custom.duration} minutes. Rating: {rating}.",
            category=category,
            rating=GuideRating(value=rating, system=RATING_SYSTEM) if rating else None,
        ))

    return programmes


def _placeholder_events(channel: ChannelRecord, now: datetime) -> list[GuideEvent]:
    """Consecutive one-hour filler programmes for channels without EPG data"""
    programmes = []

    for index in range(PLACEHOLDER_COUNT):
        start = now + index * PLACEHOLDER_LENGTH
        show = f"Dummy Show {index + 1} on {channel.title}"
        programmes.append(GuideEvent(
            channel_id=channel.id,
            start=start,
            stop=start + PLACEHOLDER_LENGTH,
            title=show,
            description=f"This is a placeholder description for {show}.",
        ))

    return programmes


def _xml_safe(value: str) -> str:
    """Replace characters XML cannot carry with U+FFFD"""
    return _XML_INVALID.sub("\ufffd", value)


def _text_element(parent: etree._Element, tag: str, text: str, lang: str | None = None) -> etree._Element:
    element = etree.SubElement(parent, tag)
    if lang is not None:
        element.set("lang", lang)
    element.text = _xml_safe(text)
    return element


def _build_tree(document: GuideDocument) -> etree._Element:
    root = etree.Element("tv")
    root.set("date", format_xmltv_date(document.generated_on))
    root.set("generator-info-name", _xml_safe(document.generator_info_name))
    root.set("source-info-name", _xml_safe(document.source_info_name))

    for channel in document.channels:
        channel_elem = etree.SubElement(root, "channel", id=_xml_safe(channel.id))
        _text_element(channel_elem, "display-name", channel.display_name, channel.lang)
        if channel.icon_url:
            etree.SubElement(channel_elem, "icon", src=_xml_safe(channel.icon_url))
        _text_element(channel_elem, "url", channel.url)

    for programme in document.programmes:
        programme_elem = etree.SubElement(root, "programme")
        programme_elem.set("start", format_xmltv_time(programme.start))
        programme_elem.set("stop", format_xmltv_time(programme.stop))
        programme_elem.set("channel", _xml_safe(programme.channel_id))
        _text_element(programme_elem, "title", programme.title, "en")
        _text_element(programme_elem, "desc", programme.description, "en")
        if programme.category is not None:
            _text_element(programme_elem, "category", programme.category, "en")
        if programme.rating is not None:
            rating_elem = etree.SubElement(programme_elem, "rating")
            if programme.rating.system:
                rating_elem.set("system", _xml_safe(programme.rating.system))
            _text_element(rating_elem, "value", programme.rating.value)

    return root


def render_guide(document: GuideDocument) -> bytes:
    """
    Serialize the guide as an indented XMLTV document

    Characters XML cannot carry are replaced with U+FFFD.

    Returns:
        UTF-8 bytes: XML declaration, DOCTYPE line, then the <tv> tree

    Raises:
        RenderError: If lxml fails to build or serialize the tree
    """
    try:
        root = _build_tree(document)
        body = etree.tostring(root, pretty_print=True, encoding="unicode")
    except (ValueError, TypeError, etree.LxmlError) as e:
        logger.error(f"XMLTV serialization failed: {e}")
        raise RenderError(f"error marshalling XML: {e}") from e

    return (XML_DECLARATION + DOCTYPE + body).encode("utf-8")
