"""
Brave Search Client - Outbound web search used by the search tool

Module: capabilities.search
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - aiohttp GET against the Brave web search API
  - Credential checked per call, never at startup
  - Non-2xx statuses, transport errors and timeouts mapped to UpstreamError

SECURITY NOTES:
- The API key is sent only as the X-Subscription-Token header
- The API key is never logged
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ..core.constants import DEFAULT_SEARCH_TIMEOUT
from ..core.errors import (
    InvocationTimeoutError,
    MissingCredentialError,
    UpstreamError,
)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
DEFAULT_RESULT_COUNT = 5


class BraveSearchClient:
    """
    Minimal Brave web search client

    Typical usage:
        client = BraveSearchClient(api_key, timeout=10.0)
        results = await client.search("mcp protocol", count=3)
    """

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = DEFAULT_SEARCH_TIMEOUT,
        endpoint: str = BRAVE_SEARCH_URL,
    ):
        """
        Initialize search client

        Args:
            api_key: Brave subscription token (None = search unavailable)
            timeout: Total deadline of one HTTP request in seconds
            endpoint: Search API URL
        """
        self.logger = logging.getLogger("capabilities.search")
        self._api_key = api_key
        self.timeout = timeout
        self.endpoint = endpoint

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    async def search(self, query: str, count: Any = DEFAULT_RESULT_COUNT) -> List[Dict[str, Any]]:
        """
        Run one web search

        Args:
            query: Search terms
            count: Number of results requested

        Returns:
            list: web.results of the API response ([] if absent)

        Raises:
            MissingCredentialError: If no API key is configured
            UpstreamError: If the API answers with a non-2xx status or
                cannot be reached
            InvocationTimeoutError: If the API does not answer in time
        """
        if not self._api_key:
            raise MissingCredentialError("BRAVE_API_KEY environment variable is not set")

        if isinstance(count, float) and count.is_integer():
            count = int(count)

        params = {"q": query, "count": str(count)}
        headers = {
            "X-Subscription-Token": self._api_key,
            "Accept": "application/json",
        }

        self.logger.info(f"Brave search: query={query!r}, count={count}")

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.get(self.endpoint, params=params, headers=headers) as response:
                    if not 200 <= response.status < 300:
                        raise UpstreamError(f"Brave search failed: {response.reason}")
                    data = await response.json(content_type=None)

        except asyncio.TimeoutError:
            raise InvocationTimeoutError(
                f"Brave search failed: no answer after {self.timeout}s"
            )
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Brave search failed: {e}")

        web = data.get("web") if isinstance(data, dict) else None
        results = (web or {}).get("results") or []
        self.logger.debug(f"Brave search returned {len(results)} results")
        return results
