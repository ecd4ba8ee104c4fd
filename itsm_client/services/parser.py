"""
ITSM Response Parser

raw payload -> Response, or RemoteFault.

Rules:
- `status` is the ONLY success signal (no HTTP-style codes)
- success with no rows -> empty SearchResult, not None
- objList keeps both levels of nesting
"""

from typing import Any, Mapping

import pydantic

from ..errors import MalformedResponse, RemoteFault
from ..logger import get_logger
from ..models.response import Response


logger = get_logger(__name__)

DEFAULT_SUCCESS_STATUS = "Success"


class ResponseParser:
    """Validates remote payloads against the common response envelope."""

    def __init__(self, success_status: str = DEFAULT_SUCCESS_STATUS):
        self.success_status = success_status

    def is_success(self, status: str) -> bool:
        return status == self.success_status

    def parse(self, raw: Any) -> Response:
        """
        Parse a decoded JSON payload.

        Raises:
            RemoteFault: status is anything but success
            MalformedResponse: payload is not a response envelope
        """
        if not isinstance(raw, Mapping):
            raise MalformedResponse(
                f"Expected a JSON object, got {type(raw).__name__}"
            )

        status = raw.get("status")
        if not isinstance(status, str):
            raise MalformedResponse("Response has no status")

        if not self.is_success(status):
            reason = raw.get("exceptionReason")
            logger.warning("Remote returned status %r: %s", status, reason)
            raise RemoteFault(status, None if reason is None else str(reason))

        try:
            return Response.model_validate(raw)
        except pydantic.ValidationError as exc:
            raise MalformedResponse(
                f"Unexpected response shape: {exc.error_count()} error(s)",
                status=status,
            ) from exc
