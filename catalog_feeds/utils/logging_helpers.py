"""
Structured logging helpers for consistent log formatting.
"""
import logging


def log_pipeline_start(logger: logging.Logger, feed: str, url: str | None) -> None:
    """
    Log the start of a feed request.

    Args:
        logger: Logger instance
        feed: Name of the output being produced (m3u, xmltv, ...)
        url: Upstream catalog URL
    """
    logger.info(f"Building {feed} feed from {url or '<unset>'}")


def log_decode_summary(logger: logging.Logger, feed: str, channels: int) -> None:
    """Log how many channel records were decoded."""
    logger.info(f"{feed}: decoded {channels} channels")


def log_render_summary(logger: logging.Logger, feed: str, items: int, size: int) -> None:
    """
    Log the rendered output.

    Args:
        logger: Logger instance
        feed: Name of the output
        items: Number of entries rendered
        size: Body size in bytes
    """
    logger.info(f"{feed}: rendered {items} entries ({size} bytes)")


def log_pipeline_failure(logger: logging.Logger, feed: str, error: Exception) -> None:
    """Log a terminal pipeline failure."""
    logger.error(f"{feed}: {type(error).__name__}: {error}")
