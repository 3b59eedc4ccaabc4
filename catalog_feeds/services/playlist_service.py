"""
M3U playlist service

Projects channel records into #EXTINF entries and renders the playlist body.
"""
from collections.abc import Sequence
import logging

from catalog_feeds.field_policy import FieldPolicy
from catalog_feeds.schemas import ChannelRecord
from catalog_feeds.services.feed_types import PlaylistEntry


logger = logging.getLogger(__name__)

EXTINF_TEMPLATE = (
    '#EXTINF:-1 tvg-chno="{number}" tvg-id="{id}" tvg-name="{name}" '
    'tvg-logo="{logo}" group-title="{group}", {name} \n{url}\n'
)

M3U_HEADER = "#EXTM3U\n"


def project_playlist(
    channels: Sequence[ChannelRecord | None],
    group: str,
    policy: FieldPolicy
) -> list[PlaylistEntry | None]:
    """
    Build one playlist entry per channel, numbered by input position

    Args:
        channels: Decoded catalog; None elements yield None entries
        group: group-title label for every entry
        policy: Field policy selecting the logo and stream URLs

    Returns:
        Entries in input order; a None slot still consumes its number
    """
    entries: list[PlaylistEntry | None] = []

    for number, channel in enumerate(channels):
        if channel is None:
            entries.append(None)
            continue

        entries.append(PlaylistEntry(
            number=number,
            id=channel.id,
            name=channel.title,
            logo=policy.select(channel, "playlist_logo"),
            group=group,
            url=policy.select(channel, "playlist_stream"),
        ))

    return entries


def render_playlist(entries: Sequence[PlaylistEntry | None]) -> str:
    """
    Render entries as #EXTINF blocks separated by a blank line

    None entries are skipped without renumbering the others. The display
    name is the channel title as-is.
    """
    blocks = [
        EXTINF_TEMPLATE.format(
            number=entry.number,
            id=entry.id,
            name=entry.name,
            logo=entry.logo,
            group=entry.group,
            url=entry.url,
        )
        for entry in entries
        if entry is not None
    ]
    logger.debug(f"Rendered {len(blocks)} of {len(entries)} playlist entries")
    return "\n".join(blocks)
