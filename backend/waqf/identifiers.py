"""
Human-readable identifiers for donations and orders.

Both are ``<prefix>-<unix millis>-<random suffix>``. Uniqueness is
probabilistic: nothing checks the database for a collision.
"""
import secrets
import string
import time
import uuid
from typing import Optional

BASE36 = string.digits + string.ascii_uppercase


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_external_id(timestamp_ms: Optional[int] = None) -> str:
    """DON-<ms>-<8 uppercase hex chars>"""
    ts = timestamp_ms if timestamp_ms is not None else _now_ms()
    return f"DON-{ts}-{uuid.uuid4().hex[:8].upper()}"


def generate_order_number(timestamp_ms: Optional[int] = None) -> str:
    """ORD-<ms>-<5 uppercase base36 chars>"""
    ts = timestamp_ms if timestamp_ms is not None else _now_ms()
    suffix = ''.join(secrets.choice(BASE36) for _ in range(5))
    return f"ORD-{ts}-{suffix}"
