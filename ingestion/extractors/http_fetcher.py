"""
Streaming HTTP fetcher for the source archive.

Downloads a remote resource straight to the staging area:
- Response body streamed to disk chunk by chunk, never buffered whole
- Written to a sibling ".part" file and renamed into place once complete
- Any transport failure or non-success status removes partial output
  before the FetchError propagates
- No retries; a failed fetch fails the run immediately
"""

import os
import httpx
from pathlib import Path
from typing import Optional
from core.exceptions import FetchError
import logging

logger = logging.getLogger(__name__)


class ResourceFetcher:
    """
    Fetch a remote resource over HTTPS into a local file.

    Attributes:
        timeout: Request timeout in seconds (default: 60.0)
        chunk_size: Bytes per chunk written to disk (default: 64 KiB)
        require_https: Refuse plain-http URLs (default: True)
        transport: Optional httpx transport (e.g. httpx.MockTransport)
    """

    def __init__(
        self,
        timeout: float = 60.0,
        chunk_size: int = 64 * 1024,
        require_https: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.require_https = require_https
        self.transport = transport

    @staticmethod
    def partial_path(destination: Path) -> Path:
        """Where bytes land while the download is in flight"""
        return destination.with_name(destination.name + ".part")

    def _check_url(self, url: str) -> None:
        try:
            scheme = httpx.URL(url).scheme
        except httpx.InvalidURL as e:
            raise FetchError(
                f"Invalid URL: {url}",
                context={"url": url},
                original_exception=e
            )
        allowed = ("https",) if self.require_https else ("https", "http")
        if scheme not in allowed:
            raise FetchError(
                f"Refusing to fetch from non-{'/'.join(allowed)} URL",
                context={"url": url}
            )

    async def fetch(self, url: str, destination: Path) -> Path:
        """
        Download url to destination.

        Args:
            url: Source URL of the resource
            destination: Local file path; parent directories are created

        Returns:
            The destination path, holding the complete response body

        Raises:
            FetchError: On connection errors, timeouts, non-2xx responses
                or local write failures. No partial file is left behind.
        """
        self._check_url(url)

        destination = Path(destination)
        part_path = self.partial_path(destination)
        status_code: Optional[int] = None
        completed = False

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            # The staged archive belongs to the current run only
            destination.unlink(missing_ok=True)

            logger.info(f"Fetching {url} -> {destination}")

            bytes_written = 0
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport
            ) as client:
                async with client.stream("GET", url) as response:
                    status_code = response.status_code
                    response.raise_for_status()

                    with open(part_path, "wb") as fh:
                        async for chunk in response.aiter_bytes(self.chunk_size):
                            fh.write(chunk)
                            bytes_written += len(chunk)

            os.replace(part_path, destination)
            completed = True

            logger.info(f"Fetched {bytes_written} bytes from {url}")
            return destination

        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Unexpected status {status_code} fetching {url}",
                context={
                    "url": url,
                    "destination": destination,
                    "status_code": status_code
                },
                original_exception=e
            )

        except httpx.TimeoutException as e:
            raise FetchError(
                f"Timed out after {self.timeout}s fetching {url}",
                context={"url": url, "destination": destination, "timeout": self.timeout},
                original_exception=e
            )

        except httpx.HTTPError as e:
            raise FetchError(
                f"Transport error fetching {url}",
                context={"url": url, "destination": destination, "status_code": status_code},
                original_exception=e
            )

        except OSError as e:
            raise FetchError(
                f"Could not write fetched data to {destination}",
                context={"url": url, "destination": destination},
                original_exception=e
            )

        finally:
            if not completed:
                self._discard(part_path, destination)

    @staticmethod
    def _discard(*paths: Path) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to delete incomplete file {path}: {e}")
