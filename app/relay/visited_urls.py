import logging
from typing import List, Optional

import httpx

from app.utils import mask_url_credentials

logger = logging.getLogger("uvicorn.error")


class VisitedUrls:
    """
    Ordered trail of the URLs one outbound call touched.

    An instance belongs to exactly one relay call. ``on_request`` and
    ``on_response`` are registered as httpx event hooks, so they fire for the
    initial request and for every redirect hop in network order. A hop shows
    up once per visit: the response of a hop carries the same URL its request
    was sent to, and only that repeat is skipped. A redirect back to the same
    URL is a new hop and is recorded again.
    """

    def __init__(self) -> None:
        self._urls: List[str] = []
        self._pending: Optional[str] = None

    def record(self, url) -> None:
        self._urls.append(str(url))

    async def on_request(self, request: httpx.Request) -> None:
        logger.debug(f"[Relay] -> {request.method} {mask_url_credentials(str(request.url))}")
        self.record(request.url)
        self._pending = str(request.url)

    async def on_response(self, response: httpx.Response) -> None:
        logger.debug(
            f"[Relay] <- {response.status_code} {mask_url_credentials(str(response.url))}"
        )
        pending, self._pending = self._pending, None
        if str(response.url) != pending:
            self.record(response.url)

    @property
    def urls(self) -> List[str]:
        return list(self._urls)

    def __len__(self) -> int:
        return len(self._urls)
