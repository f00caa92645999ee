import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from app.models import RelayRequest
from app.relay.outcome import UpstreamFailure, UpstreamOutcome, UpstreamSuccess
from app.relay.visited_urls import VisitedUrls
from app.utils import mask_url_credentials
from app.vars import RELAY_ALLOW_UNSAFE_CERT, RELAY_MAX_REDIRECTS, RELAY_TIMEOUT

logger = logging.getLogger("uvicorn.error")


def _header_value(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


@dataclass
class OutboundCallConfig:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    json_body: Optional[Dict[str, Any]] = None
    verify_tls: bool = True
    timeout: float = RELAY_TIMEOUT
    max_redirects: int = RELAY_MAX_REDIRECTS

    @classmethod
    def from_relay_request(cls, relay_request: RelayRequest) -> "OutboundCallConfig":
        headers = {
            name: _header_value(value)
            for name, value in (relay_request.headers or {}).items()
            if value is not None
        }
        return cls(
            method=relay_request.method.upper(),
            url=relay_request.url,
            headers=headers,
            json_body=relay_request.data,
            verify_tls=not RELAY_ALLOW_UNSAFE_CERT,
            timeout=RELAY_TIMEOUT,
            max_redirects=RELAY_MAX_REDIRECTS,
        )


def build_transport(config: OutboundCallConfig) -> httpx.AsyncBaseTransport:
    # retries=0: a relay call is a single attempt
    return httpx.AsyncHTTPTransport(verify=config.verify_tls, retries=0)


def build_client(config: OutboundCallConfig, visited: VisitedUrls) -> httpx.AsyncClient:
    """Client for one relay call, with the visited-URL hooks attached."""
    return httpx.AsyncClient(
        transport=build_transport(config),
        timeout=httpx.Timeout(config.timeout),
        follow_redirects=True,
        max_redirects=config.max_redirects,
        event_hooks={
            "request": [visited.on_request],
            "response": [visited.on_response],
        },
    )


async def send_upstream(config: OutboundCallConfig) -> UpstreamOutcome:
    """
    Issue the outbound call and return the still-open upstream answer.

    The response body is left unread so the caller can either drain it or
    stream it through. The returned outcome owns the client and must be closed
    with ``aclose()``. Transport failures (no response at all) propagate as
    httpx exceptions.
    """
    visited = VisitedUrls()
    client = build_client(config, visited)
    try:
        request = client.build_request(
            config.method,
            config.url,
            headers=config.headers or None,
            json=config.json_body,
        )
        response = await client.send(request, stream=True)
    except BaseException:
        await client.aclose()
        raise

    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning(
            f"[Relay] Upstream answered {e.response.status_code} for "
            f"{mask_url_credentials(str(e.response.url))}"
        )
        return UpstreamFailure(response=e.response, client=client)

    return UpstreamSuccess(response=response, client=client, urls=visited.urls)
