"""TVMaze API client for fetching the full episode schedule."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from tvshows.config import settings

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Outcome of one feed fetch."""

    success: bool
    data: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @property
    def count(self) -> int:
        return len(self.data)


class TVMazeClient:
    """Client for the TVMaze full schedule feed."""

    USER_AGENT = "TV Shows API/1.0"

    def __init__(self, url: str | None = None, timeout: float | None = None) -> None:
        """
        Initialize TVMaze client.

        Args:
            url: Feed URL (uses settings if not provided)
            timeout: Connect and read timeout in seconds (uses settings if not provided)
        """
        self.url = url or settings.tvmaze_api_url
        self.timeout = timeout if timeout is not None else settings.fetch_timeout

    async def fetch_full_schedule(self) -> FetchResult:
        """
        Fetch the full schedule in a single GET request.

        Returns:
            FetchResult with the episode records, or with an error message.

        Raises:
            Should NOT raise for HTTP, transport or decoding failures; those
            are reported on the result.
        """
        logger.info(f"Fetching TVMaze schedule from {self.url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.url,
                    headers={"User-Agent": self.USER_AGENT},
                )
        except httpx.HTTPError as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"TVMaze fetch error: {message}")
            return FetchResult(success=False, error=message)

        if not response.is_success:
            message = f"HTTP {response.status_code}: {response.reason_phrase}"
            logger.error(f"TVMaze API error: {message}")
            return FetchResult(success=False, error=message)

        return self.parse_response(response.text)

    def parse_response(self, body: str) -> FetchResult:
        """
        Decode a feed body.

        Args:
            body: Raw response body

        Returns:
            FetchResult carrying the decoded JSON array
        """
        try:
            data = json.loads(body)
        except ValueError as e:
            logger.error(f"TVMaze JSON parse error: {e}")
            return FetchResult(success=False, error="Invalid JSON response")

        if not isinstance(data, list):
            logger.error(f"Unexpected TVMaze payload type: {type(data).__name__}")
            return FetchResult(success=False, error="Unexpected response format")

        logger.info(f"Fetched {len(data)} records from TVMaze")
        return FetchResult(success=True, data=data)
