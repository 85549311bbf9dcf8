"""Request ID management for request correlation.

The ID lives in a ContextVar so every log line emitted while handling a
request, including those from the Shopify client, carries it.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Mapping, Optional

# Honoured on the way in when a proxy already assigned one; echoed on every response.
REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied IDs end up in logs and response headers
_ACCEPTABLE_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    return uuid.uuid4().hex


def resolve_request_id(headers: Mapping[str, str]) -> str:
    """Reuse the inbound X-Request-ID when it looks like an ID, else make a new one."""
    incoming = headers.get(REQUEST_ID_HEADER) or ""
    if _ACCEPTABLE_ID.fullmatch(incoming):
        return incoming
    return generate_request_id()


def get_request_id() -> str:
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)
