from dataclasses import dataclass
from typing import List, Optional, Union

import httpx


class JsonBodyDecodeError(Exception):
    """The upstream declared a JSON content-type but its body did not parse."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Error parsing JSON data from {url}: {cause}")
        self.url = url
        self.cause = cause


@dataclass
class _OpenUpstream:
    response: httpx.Response
    client: httpx.AsyncClient

    @property
    def status_code(self) -> int:
        return self.response.status_code

    async def aclose(self) -> None:
        """Release the upstream connection once the outward response is done."""
        try:
            await self.response.aclose()
        finally:
            await self.client.aclose()


@dataclass
class UpstreamSuccess(_OpenUpstream):
    """2xx answer. The body has not been read yet."""

    urls: List[str]

    @property
    def content_type(self) -> str:
        return self.response.headers.get("content-type", "")

    @property
    def is_json(self) -> bool:
        return "application/json" in self.content_type.lower()


@dataclass
class UpstreamFailure(_OpenUpstream):
    """Non-2xx answer, forwarded to the caller without interpretation."""

    @property
    def content_type(self) -> Optional[str]:
        return self.response.headers.get("content-type")


UpstreamOutcome = Union[UpstreamSuccess, UpstreamFailure]
