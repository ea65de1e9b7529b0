"""Hashing helpers for session-key signatures."""

from __future__ import annotations

import hashlib
import hmac


def hmac_sha256_hex(key: str | bytes, message: str | bytes = b"") -> str:
    """Lowercase hex HMAC-SHA256 of *message* keyed by *key*.

    The session-key endpoints sign the empty string with the user's
    session key (as its base64 text, not the decoded bytes).
    """
    if isinstance(key, str):
        key = key.encode("utf-8")
    if isinstance(message, str):
        message = message.encode("utf-8")
    return hmac.new(key, message, hashlib.sha256).hexdigest()
