"""
Relay of caller-described HTTP requests to arbitrary upstream servers.

The caller posts ``{"method", "url", "headers", "data"}``; the relay issues
that request, follows redirects while recording every URL it touched, and
answers with the parsed JSON body and the URL trail, or streams a non-2xx
upstream answer back unchanged.

Example usage with curl:
    curl -H "Content-Type: application/json" \\
         -d '{"method": "get", "url": "https://httpbin.org/redirect/1"}' \\
         "http://localhost:8000/"
"""

from .client import OutboundCallConfig, send_upstream
from .outcome import (
    JsonBodyDecodeError,
    UpstreamFailure,
    UpstreamOutcome,
    UpstreamSuccess,
)
from .visited_urls import VisitedUrls

__all__ = [
    "OutboundCallConfig",
    "send_upstream",
    "JsonBodyDecodeError",
    "UpstreamFailure",
    "UpstreamOutcome",
    "UpstreamSuccess",
    "VisitedUrls",
]
