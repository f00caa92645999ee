from typing import Any, Dict, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

RelayMethod = Literal["get", "post", "delete", "put", "patch"]


class RelayRequest(BaseModel):
    method: RelayMethod
    url: str
    headers: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None

    @field_validator("url")
    @classmethod
    def url_must_be_absolute(cls, value: str) -> str:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("url must be an absolute URI")
        return value


class RelayResponse(BaseModel):
    """Outward body for upstream calls that answered 2xx.

    ``success`` and ``data`` are only present when the upstream body was JSON.
    """

    urls: list[str]
    success: Optional[bool] = None
    data: Optional[Any] = None


class RelayErrorResponse(BaseModel):
    success: bool = False
    error: str
