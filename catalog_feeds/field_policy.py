"""
Field selection policy

Upstream schema revisions differ only in which logo/stream variant carries the
usable URL. A policy maps each logical role to a dotted JSON path on
ChannelRecord so one set of projectors serves every revision.
"""
from dataclasses import dataclass, replace
import logging

from catalog_feeds.schemas import ChannelRecord


logger = logging.getLogger(__name__)

ROLES = (
    "playlist_logo",
    "playlist_stream",
    "guide_icon",
    "guide_stream",
    "summary_image",
    "summary_stream",
)


@dataclass(frozen=True, slots=True)
class FieldPolicy:
    """Role -> JSON path mapping used by the projectors"""
    playlist_logo: str
    playlist_stream: str
    guide_icon: str
    guide_stream: str
    summary_image: str
    summary_stream: str

    def select(self, channel: ChannelRecord, role: str) -> str:
        """Read the value a role points at on a channel"""
        return channel.lookup(getattr(self, role))

    def with_overrides(self, overrides: dict[str, str]) -> "FieldPolicy":
        unknown = sorted(set(overrides) - set(ROLES))
        if unknown:
            raise ValueError(f"Unknown field policy roles: {unknown}")
        return replace(self, **overrides)

    def invalid_paths(self) -> list[str]:
        """Roles whose path does not end in a string field of ChannelRecord"""
        return [role for role in ROLES if not ChannelRecord.text_path_exists(getattr(self, role))]


HLS_BLOCKED = FieldPolicy(
    playlist_logo="ChannelLogoTablets.downloadUrl",
    playlist_stream="HLSBlockedStream.streamingUrl",
    guide_icon="ChannelLogoTablets.downloadUrl",
    guide_stream="HLSStream.streamingUrl",
    summary_image="ChannelLogoTablets.streamingUrl",
    summary_stream="HLSBlockedStream.streamingUrl",
)

ANDROID = replace(
    HLS_BLOCKED,
    playlist_stream="AndroidStream.streamingUrl",
    summary_stream="AndroidStream.streamingUrl",
)

PRESETS: dict[str, FieldPolicy] = {
    "hls-blocked": HLS_BLOCKED,
    "android": ANDROID,
}


def build_field_policy(preset: str, overrides: dict[str, str] | None = None) -> FieldPolicy:
    """
    Resolve a named preset plus per-role overrides

    Raises:
        ValueError: If the preset or a role is unknown, or a path is invalid
    """
    try:
        policy = PRESETS[preset]
    except KeyError:
        raise ValueError(f"Unknown field policy '{preset}'. Must be one of {sorted(PRESETS)}")

    if overrides:
        policy = policy.with_overrides(overrides)
        logger.debug(f"Field policy overrides applied: {overrides}")

    invalid = policy.invalid_paths()
    if invalid:
        raise ValueError(
            "Field policy paths must point at text fields: "
            + ", ".join(f"{role}={getattr(policy, role)}" for role in invalid)
        )

    return policy
