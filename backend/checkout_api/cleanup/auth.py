"""Authorization for cleanup triggers.

Two callers may run the sweep: the hosting platform's scheduler, which marks
its requests with a header (``x-vercel-cron: 1`` by default), and an operator
presenting ``Authorization: Bearer <CRON_SECRET>``.
"""

import hmac
from typing import Mapping

from ..config import Settings


def is_cron_invocation(headers: Mapping[str, str], settings: Settings) -> bool:
    return headers.get(settings.CRON_MARKER_HEADER) == "1"


def has_valid_cron_secret(headers: Mapping[str, str], settings: Settings) -> bool:
    """True when the bearer token matches CRON_SECRET. Always False without a secret."""
    if not settings.CRON_SECRET:
        return False
    authorization = headers.get("authorization") or ""
    expected = f"Bearer {settings.CRON_SECRET}"
    return hmac.compare_digest(authorization.encode("utf-8"), expected.encode("utf-8"))


def is_authorized_trigger(headers: Mapping[str, str], settings: Settings) -> bool:
    return is_cron_invocation(headers, settings) or has_valid_cron_secret(headers, settings)
