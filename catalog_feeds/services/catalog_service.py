"""
Catalog loading

Fetch + decode stage shared by every feed endpoint.
"""
import logging

from catalog_feeds.schemas import ChannelRecord
from catalog_feeds.services.channel_decoder import decode_channels
from catalog_feeds.services.upstream_fetcher import UpstreamFetcher


logger = logging.getLogger(__name__)


async def load_catalog(fetcher: UpstreamFetcher, url: str | None) -> list[ChannelRecord | None]:
    """
    Fetch the upstream catalog and decode it

    Raises:
        FetchError: If the upstream body cannot be retrieved
        DecodeError: If the body is not a valid channel array
    """
    raw = await fetcher.fetch(url)
    logger.debug(f"Fetched {len(raw)} bytes from upstream")
    return decode_channels(raw)
