"""
Time-based one-time codes for the web player token endpoint.

The shared secret ships obfuscated: every byte is XOR-masked with
``(position % 33) + 9``. Unmasking yields a list of integers whose decimal
representations, concatenated, form the ASCII secret fed into a standard
RFC 6238 generator (HMAC-SHA1, 30 second period, 6 digits).
"""

from __future__ import annotations

import hashlib
import hmac
import struct
from typing import Sequence

PERIOD = 30
DIGITS = 6


def derive_secret(obfuscated: Sequence[int]) -> str:
    """Reconstruct the secret text from its obfuscated byte sequence."""
    parts = []
    for i, b in enumerate(obfuscated):
        if not 0 <= b <= 0xFF:
            raise ValueError(f"Obfuscated secret byte out of range at {i}: {b}")
        parts.append(str(b ^ ((i % 33) + 9)))
    return "".join(parts)


def totp(key: bytes, timestamp: int, *, period: int = PERIOD, digits: int = DIGITS) -> str:
    counter = int(timestamp) // period
    digest = hmac.new(key, struct.pack(">Q", counter), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    code = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(code % (10**digits)).zfill(digits)


class TimeCodeGenerator:
    """Derives 6-digit codes from an obfuscated secret.

    The secret is unmasked once at construction; ``generate`` is pure.
    """

    def __init__(self, obfuscated_secret: Sequence[int], version: int = 5) -> None:
        if not obfuscated_secret:
            raise ValueError("Obfuscated secret must not be empty")
        self.version = version
        self._key = derive_secret(obfuscated_secret).encode("ascii")

    def generate(self, current_unix_seconds: int) -> str:
        return totp(self._key, current_unix_seconds)
