from typing import Callable, List

import httpx
import pytest


class FakeUpstream:
    """In-process upstream server: records every request the relay sends."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def upstream(monkeypatch):
    """Route relay outbound calls to a FakeUpstream instead of the network."""
    fake = FakeUpstream()
    monkeypatch.setattr(
        "app.relay.client.build_transport",
        lambda config: httpx.MockTransport(fake),
    )
    return fake
