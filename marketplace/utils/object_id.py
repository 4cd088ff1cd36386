import os
import time

from marketplace.core.constants import OBJECT_ID_RE


def generate_object_id() -> str:
    """Return a new 24-hex id: 4-byte big-endian timestamp + 8 random bytes."""
    timestamp = int(time.time()).to_bytes(4, "big")
    return (timestamp + os.urandom(8)).hex()


def is_valid_object_id(value) -> bool:
    return isinstance(value, str) and OBJECT_ID_RE.match(value) is not None
