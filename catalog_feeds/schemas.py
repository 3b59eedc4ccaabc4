from datetime import datetime, timezone
import re
from typing import Any

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)


# Zero value for instants missing from the upstream payload
ZERO_INSTANT = datetime(1, 1, 1, tzinfo=timezone.utc)

# Entries of the loosely typed category lists: any JSON value
CategoryEntry = JsonValue

# Timestamps must carry an explicit offset
RFC3339 = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})")


class UpstreamModel(BaseModel):
    """Base for models mirroring the upstream catalog JSON

    Scalars are strict: a value of the wrong JSON type fails validation
    instead of being coerced. Unknown keys are ignored and ``null`` values
    fall back to the field default.
    """
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @classmethod
    def _field_for(cls, segment: str) -> tuple[str, Any]:
        """Find a field by its JSON alias or attribute name"""
        for name, info in cls.model_fields.items():
            if segment in (name, info.alias):
                return name, info
        raise KeyError(f"{cls.__name__} has no field '{segment}'")

    def lookup(self, path: str) -> Any:
        """Resolve a dotted JSON path such as 'HLSStream.streamingUrl'"""
        value: Any = self
        for segment in path.split("."):
            name, _ = type(value)._field_for(segment)
            value = getattr(value, name)
        return value

    @classmethod
    def text_path_exists(cls, path: str) -> bool:
        """Check that a dotted JSON path ends in a string field"""
        model: Any = cls
        for segment in path.split("."):
            if not (isinstance(model, type) and issubclass(model, UpstreamModel)):
                return False
            try:
                _, info = model._field_for(segment)
            except KeyError:
                return False
            model = info.annotation
        return model is str


class StreamVariant(UpstreamModel):
    """One platform/quality variant of a stream or logo asset"""
    download_url: StrictStr = Field("", alias="downloadUrl")
    streaming_url: StrictStr = Field("", alias="streamingUrl")
    url: StrictStr = ""


class Poster(UpstreamModel):
    download_url: StrictStr = Field("", alias="downloadUrl")


class EventImage(UpstreamModel):
    width: StrictStr = ""
    height: StrictStr = ""
    download_url: StrictStr = Field("", alias="downloadUrl")


class EventCustom(UpstreamModel):
    duration: StrictInt = 0
    rating: StrictStr = ""
    image: EventImage = Field(default_factory=EventImage)


class GuideEventRecord(UpstreamModel):
    """Programme entry embedded in a channel record"""
    title: StrictStr = ""
    start: AwareDatetime = ZERO_INSTANT
    end: AwareDatetime = ZERO_INSTANT
    custom: EventCustom = Field(default_factory=EventCustom)

    @field_validator("start", "end", mode="before")
    @classmethod
    def require_rfc3339(cls, value: Any) -> Any:
        if not isinstance(value, str) or not RFC3339.fullmatch(value):
            raise ValueError(f"expected an RFC 3339 timestamp with offset, got {value!r}")
        return value


class EpgBlock(UpstreamModel):
    events: list[GuideEventRecord] = Field(default_factory=list)

    @field_validator("events", mode="before")
    @classmethod
    def null_events_to_empty(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{} if event is None else event for event in value]
        return value


class ChannelRecord(UpstreamModel):
    """One entry of the upstream channel catalog"""
    id: StrictStr = Field("", alias="_id")
    title: StrictStr = ""
    series_id: StrictStr = ""
    aired_date: StrictInt = 0
    rating: StrictStr = ""
    media_type: StrictStr = Field("", alias="mediaType")
    order: StrictInt = 0
    commerce_type: StrictStr = Field("", alias="commerceType")
    paid_type: StrictStr = Field("", alias="paidType")
    subscriptions_categories: list[StrictStr] = Field(default_factory=list, alias="subscriptionsCategories")

    vod_category: list[CategoryEntry] = Field(default_factory=list)
    categories: list[CategoryEntry] = Field(default_factory=list)
    allowed_countries: JsonValue = Field(None, alias="allowedCountries")
    ad_policy_id: JsonValue = Field(None, alias="adPolicyId")

    epg: EpgBlock = Field(default_factory=EpgBlock)

    hls_stream: StreamVariant = Field(default_factory=StreamVariant, alias="HLSStream")
    hls_blocked_stream: StreamVariant = Field(default_factory=StreamVariant, alias="HLSBlockedStream")
    android_stream: StreamVariant = Field(default_factory=StreamVariant, alias="AndroidStream")
    android_blocked_stream: StreamVariant = Field(default_factory=StreamVariant, alias="AndroidBlockedStream")

    logo_large: StrictStr = Field("", alias="logoLarge")
    channel_logo_large: StreamVariant = Field(default_factory=StreamVariant, alias="ChannelLogoLarge")
    channel_logo_tablets: StreamVariant = Field(default_factory=StreamVariant, alias="ChannelLogoTablets")
    poster_h: Poster = Field(default_factory=Poster, alias="PosterH")
    poster_f: Poster = Field(default_factory=Poster, alias="PosterF")

    @field_validator("subscriptions_categories", mode="before")
    @classmethod
    def null_strings_to_empty(cls, value: Any) -> Any:
        if isinstance(value, list):
            return ["" if item is None else item for item in value]
        return value

    def first_category(self) -> str | None:
        """
        Pick a programme category for this channel

        ``vod_category`` wins whenever it is non-empty; ``categories`` is only
        consulted when it is empty. Only a string first entry counts.
        """
        source = self.vod_category or self.categories
        if source and isinstance(source[0], str):
            return source[0]
        return None


class StreamSummary(BaseModel):
    """Simplified stream list row"""
    title: str = Field(..., description="Channel title")
    channel_img_url: str = Field(..., description="Channel image URL")
    hls_stream_url: str = Field(..., description="Stream URL")
    keywords: list[str] = Field(default_factory=list, description="Search keywords")
