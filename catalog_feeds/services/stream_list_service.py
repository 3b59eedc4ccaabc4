from collections.abc import Sequence

from catalog_feeds.field_policy import FieldPolicy
from catalog_feeds.schemas import ChannelRecord, StreamSummary


def project_stream_list(
    channels: Sequence[ChannelRecord | None],
    policy: FieldPolicy
) -> list[StreamSummary]:
    """Reduce each channel to its title, image and stream URL"""
    return [
        StreamSummary(
            title=channel.title,
            channel_img_url=policy.select(channel, "summary_image"),
            hls_stream_url=policy.select(channel, "summary_stream"),
            keywords=[],
        )
        for channel in channels
        if channel is not None
    ]
