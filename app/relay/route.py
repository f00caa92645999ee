import json
import logging
from typing import Any, AsyncIterator

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from opentelemetry import trace

from app.models import RelayErrorResponse, RelayRequest, RelayResponse
from app.relay.client import OutboundCallConfig, send_upstream
from app.relay.outcome import JsonBodyDecodeError, UpstreamFailure, UpstreamSuccess
from app.utils import mask_url_credentials
from app.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)
from app.utils.traced_requests import traced_request

router = APIRouter()
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

JSON_PARSE_ERROR_MESSAGE = "Error parsing JSON data"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


async def read_json_body(outcome: UpstreamSuccess) -> Any:
    """Drain the upstream body into one buffer and parse it as UTF-8 JSON."""
    body = await outcome.response.aread()
    try:
        return json.loads(body.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as e:
        raise JsonBodyDecodeError(str(outcome.response.url), e) from e


async def respond_success(outcome: UpstreamSuccess) -> JSONResponse:
    """
    Shape a 2xx upstream answer.

    JSON bodies are parsed and returned under ``data``. Any other body is
    dropped unread and only the visited URLs are returned.
    """
    try:
        if outcome.is_json:
            content = RelayResponse(
                urls=outcome.urls, success=True, data=await read_json_body(outcome)
            )
        else:
            content = RelayResponse(urls=outcome.urls)
        return JSONResponse(content=content.model_dump(exclude_unset=True))
    finally:
        await outcome.aclose()


async def stream_upstream_body(outcome: UpstreamFailure) -> AsyncIterator[bytes]:
    """Yield the upstream body, closing the upstream call however streaming ends."""
    try:
        async for chunk in outcome.response.aiter_bytes():
            yield chunk
    finally:
        await outcome.aclose()


def forward_failure(outcome: UpstreamFailure) -> StreamingResponse:
    """Stream a non-2xx upstream body back as-is, keeping its status code."""
    return StreamingResponse(
        stream_upstream_body(outcome),
        status_code=outcome.status_code,
        media_type=outcome.content_type,
    )


@router.post("/", response_model=None)
async def relay(relay_request: RelayRequest) -> Response:
    """Issue the described request upstream and relay the answer."""
    config = OutboundCallConfig.from_relay_request(relay_request)

    with traced_request(
        tracer,
        operation="relay_request",
        target_url=config.url,
        start_message=f"[Relay] {config.method} {config.url}",
        extra_attrs={"relay.method": config.method},
    ) as span:
        try:
            outcome = await send_upstream(config)
            span.set_attribute("relay.status_code", outcome.status_code)

            if isinstance(outcome, UpstreamFailure):
                return forward_failure(outcome)

            span.set_attribute("relay.redirects", max(len(outcome.urls) - 1, 0))
            return await respond_success(outcome)

        except JsonBodyDecodeError as e:
            logger.warning(
                f"[Relay] {JSON_PARSE_ERROR_MESSAGE} from "
                f"{mask_url_credentials(e.url)}: {e.cause}"
            )
            span.set_attribute("relay.error", "json_decode")
            return PlainTextResponse(JSON_PARSE_ERROR_MESSAGE, status_code=500)

        except Exception as e:
            log_exception_with_details(logger, "[Relay]", e)
            span.set_attribute("relay.error", type(e).__name__)
            return JSONResponse(
                status_code=500,
                content=RelayErrorResponse(
                    error=format_exception_message(e)
                ).model_dump(),
            )
