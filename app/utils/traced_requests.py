import logging
from typing import Optional, Dict
from contextlib import contextmanager

from opentelemetry.trace import Tracer

from app.utils import mask_url_credentials

logger = logging.getLogger("uvicorn.error")


@contextmanager
def traced_request(
    tracer: Tracer,
    operation: str,
    target_url: str,
    start_message: str,
    extra_attrs: Optional[Dict] = None,
):
    """Context manager to create a span, set common attributes, and log a start message."""
    safe_url = mask_url_credentials(target_url)
    with tracer.start_as_current_span(operation) as span:
        span.set_attribute("relay.target_url", safe_url)
        if extra_attrs:
            for k, v in extra_attrs.items():
                span.set_attribute(k, v)
        logger.info(start_message.replace(target_url, safe_url))
        yield span
