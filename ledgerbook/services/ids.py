"""
Identifier generation.

Ids are short, URL-safe strings: the creation time in milliseconds as
base 36, followed by random base-36 characters. Uniqueness within a
collection is the only guarantee callers rely on.
"""

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id(random_length: int = 11) -> str:
    """Return a new collision-resistant identifier, e.g. 'm2a8x9k0f3qz7h1c2wd'."""
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(random_length))
    return _to_base36(millis) + suffix
