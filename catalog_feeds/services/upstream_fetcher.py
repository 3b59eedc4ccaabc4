"""
Upstream catalog fetcher

Issues the single GET per request that retrieves the channel catalog.
"""
import logging

import httpx

from catalog_feeds.exceptions import FetchError


logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

MAX_REDIRECTS = 10


class UpstreamFetcher:
    """
    Fetches the raw catalog body from the upstream media API.

    One attempt per call, no retries, and the httpx default timeout.
    Up to MAX_REDIRECTS redirects are followed.
    """

    def __init__(
        self,
        check_status: bool = False,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """
        Args:
            check_status: Raise FetchError on non-2xx responses
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._check_status = check_status
        self._transport = transport

    async def fetch(self, url: str | None) -> bytes:
        """
        Download the catalog body

        Args:
            url: Upstream catalog URL

        Returns:
            Raw response body

        Raises:
            FetchError: On an empty URL, transport or read failure, or (when
                status checking is enabled) a non-2xx response
        """
        logger.info(f"Attempting to fetch for url: {url}")

        if not url:
            logger.error("Upstream fetch skipped: no URL given")
            raise FetchError("no upstream URL given")

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            ) as client:
                response = await client.get(url, headers=JSON_HEADERS)
                logger.debug(f"Upstream responded HTTP {response.status_code} ({len(response.content)} bytes)")

                if self._check_status:
                    response.raise_for_status()

                return response.content

        except httpx.HTTPStatusError as e:
            logger.error(f"Upstream returned HTTP {e.response.status_code} for {url}")
            raise FetchError(f"upstream returned HTTP {e.response.status_code}") from e

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Upstream fetch failed for {url}: {type(e).__name__}: {e}")
            raise FetchError(f"{type(e).__name__}: {e}") from e
