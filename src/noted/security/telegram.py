"""Verification of Telegram login widget payloads.

See https://core.telegram.org/widgets/login#checking-authorization
"""

import hashlib
import hmac
import time
from typing import Any, Mapping, Optional

from ..config import get_settings
from ..core.exceptions import AuthenticationError


def data_check_string(fields: Mapping[str, Any]) -> str:
    """Sorted ``key=value`` lines of every field except ``hash``."""
    return "\n".join(f"{key}={fields[key]}" for key in sorted(fields) if key != "hash")


def sign(fields: Mapping[str, Any], bot_token: str) -> str:
    secret = hashlib.sha256(bot_token.encode()).digest()
    return hmac.new(secret, data_check_string(fields).encode(), hashlib.sha256).hexdigest()


def verify_login(
    fields: Mapping[str, Any], bot_token: Optional[str] = None, now: Optional[float] = None
) -> None:
    """Raise AuthenticationError unless the payload is authentic and fresh."""
    settings = get_settings()
    bot_token = bot_token if bot_token is not None else settings.telegram_bot_token
    if not bot_token:
        raise AuthenticationError("Telegram login is not configured")

    received = str(fields.get("hash", ""))
    if not hmac.compare_digest(sign(fields, bot_token), received):
        raise AuthenticationError("Invalid login signature")

    now = time.time() if now is None else now
    try:
        auth_date = int(fields.get("auth_date", 0))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid auth_date")
    if now - auth_date > settings.telegram_auth_max_age_seconds:
        raise AuthenticationError("Login payload expired")
