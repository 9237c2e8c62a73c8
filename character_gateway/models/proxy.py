"""
Result models for upstream calls.

An upstream fetch resolves to exactly one of ``UpstreamResponse`` or
``ProxyError``; callers branch on the variant instead of catching exceptions.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class ProxyErrorKind(str, Enum):
    """Failure modes of an upstream call."""
    NETWORK = "network"
    TIMEOUT = "timeout"
    UPSTREAM_STATUS = "upstream_status"
    INVALID_PAYLOAD = "invalid_payload"


@dataclass(frozen=True)
class UpstreamResponse:
    """Successful upstream response.

    ``content`` holds the body exactly as received so it can be passed
    through byte for byte; ``payload`` is the parsed JSON.
    """
    content: bytes
    status_code: int = 200
    elapsed_ms: float = 0.0
    payload: Any = field(default=None, compare=False)

    ok = True

    @classmethod
    def from_body(cls, content: bytes, status_code: int = 200, elapsed_ms: float = 0.0) -> "UpstreamResponse":
        """Parse ``content`` as JSON.

        Raises:
            ValueError: If the body is empty or not valid JSON.
        """
        payload = json.loads(content)
        return cls(content=content, status_code=status_code, elapsed_ms=elapsed_ms, payload=payload)


@dataclass(frozen=True)
class ProxyError:
    """Failed upstream call. ``message`` never contains the credential."""
    kind: ProxyErrorKind
    message: str
    status_code: Optional[int] = None

    ok = False


FetchResult = Union[UpstreamResponse, ProxyError]


class ErrorResponse(BaseModel):
    """Body returned to inbound callers when the upstream call fails."""
    error: str = Field(..., description="Description of the upstream failure")
