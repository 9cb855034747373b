"""Time-ordered identifiers for stored documents."""

import os
import re
import time
import uuid
from datetime import datetime, timezone

_UUID7_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-7[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)


def generate_user_id() -> str:
    """Generate a UUID version 7 string.

    Layout (RFC 9562): 48-bit unix epoch milliseconds, 4-bit version,
    12 random bits, 2-bit variant, 62 random bits.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), 'big')

    value = (timestamp_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76
    value |= ((rand >> 62) & 0xFFF) << 64
    value |= 0b10 << 62
    value |= rand & 0x3FFF_FFFF_FFFF_FFFF
    return str(uuid.UUID(int=value))


def is_valid_user_id(user_id: str) -> bool:
    return bool(_UUID7_PATTERN.match(user_id or ''))


def get_id_timestamp(user_id: str) -> datetime | None:
    """Extract the creation time encoded in a UUIDv7, or None if not a UUIDv7."""
    if not is_valid_user_id(user_id):
        return None
    timestamp_ms = int(user_id[:8] + user_id[9:13], 16)
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
