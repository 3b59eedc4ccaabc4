import logging

from pydantic import TypeAdapter, ValidationError

from catalog_feeds.exceptions import DecodeError
from catalog_feeds.schemas import ChannelRecord

logger = logging.getLogger(__name__)

_channel_list = TypeAdapter(list[ChannelRecord | None] | None)


def decode_channels(raw: bytes | str) -> list[ChannelRecord | None]:
    """
    Decode the upstream body as a JSON array of channel records

    Top-level null elements are kept as None so downstream numbering stays
    aligned with the upstream order. A null body decodes to an empty list.

    Raises:
        DecodeError: On malformed JSON or a value of the wrong type
    """
    try:
        channels = _channel_list.validate_json(raw) or []
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
        logger.error(f"Error parsing JSON: {e.error_count()} error(s), first at {location}: {first.get('msg')}")
        raise DecodeError(f"{location}: {first.get('msg')}") from e

    logger.debug(f"Decoded {len(channels)} channel records")
    return channels
