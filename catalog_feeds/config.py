import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_feeds.field_policy import FieldPolicy, build_field_policy


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    media_url: str | None = None
    check_upstream_status: bool = False  # Treat non-2xx upstream responses as fetch failures

    playlist_group: str = "TVJ"
    playlist_media_type: str = "text/plain; charset=utf-8"
    playlist_emit_header: bool = False  # Prepend #EXTM3U to the playlist body
    playlist_require_media_url: bool = False

    field_policy: str = "hls-blocked"
    field_overrides: dict[str, str] = {}

    generator_info_name: str = "MyGoEPGGenerator"
    source_info_name: str = "EPG Data from Go Application"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("media_url", mode="before")
    @classmethod
    def parse_media_url(cls, value):
        """Treat an empty value as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("media_url", mode="after")
    @classmethod
    def validate_media_url(cls, value):
        """Validate the upstream URL is HTTP/HTTPS."""
        if value is None:
            return value
        value = value.strip()
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"MEDIA_URL must be HTTP/HTTPS: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_field_policy(self):
        """Resolve the field policy once so bad paths fail at startup."""
        build_field_policy(self.field_policy, self.field_overrides)

        if not self.media_url:
            logger.warning(
                "MEDIA_URL is not set - feed endpoints will fail until it is configured"
            )

        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Media URL: %s", self.media_url or "not set")
        logger.info("  Check Upstream Status: %s", self.check_upstream_status)
        logger.info("  Playlist Group: %s", self.playlist_group)
        logger.info("  Playlist Media Type: %s", self.playlist_media_type)
        logger.info("  Playlist Header: %s", self.playlist_emit_header)
        logger.info("  Playlist Requires Media URL: %s", self.playlist_require_media_url)
        logger.info("  Field Policy: %s", self.field_policy)
        if self.field_overrides:
            logger.info("  Field Overrides: %s", self.field_overrides)
        logger.info("  Generator Info: %s / %s", self.generator_info_name, self.source_info_name)

    def resolved_field_policy(self) -> FieldPolicy:
        return build_field_policy(self.field_policy, self.field_overrides)


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
