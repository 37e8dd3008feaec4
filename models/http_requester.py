import logging
from typing import Any, Protocol, runtime_checkable

import httpx

import config

logger = logging.getLogger(__name__)


@runtime_checkable
class HTTPRequester(Protocol):
    """Issues one GET and returns the decoded JSON body.

    Transport problems surface as httpx.RequestError, non-2xx responses as
    httpx.HTTPStatusError and undecodable bodies as ValueError."""

    async def request(self, url: str, params: dict[str, Any]) -> Any: ...


class HttpxRequester:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def request(self, url: str, params: dict[str, Any]) -> Any:
        logger.debug("GET %s %s", url, params)
        response = await self.client.get(
            url,
            params=params,
            timeout=config.REQUEST_TIMEOUT,
            headers={"User-Agent": config.USER_AGENT},
        )
        response.raise_for_status()
        return response.json()
