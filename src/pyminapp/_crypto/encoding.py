"""Strict base64 decoding for keys, IVs and ciphertexts."""

from __future__ import annotations

import base64
import binascii

from pyminapp.exceptions import MinappDecryptError


def decode_b64(value: str | bytes, *, name: str, expected_len: int | None = None) -> bytes:
    """Decode standard base64, rejecting anything that is not.

    Parameters
    ----------
    value : str or bytes
        Base64 text.  Surrounding whitespace is ignored.
    name : str
        Field name used in error messages.
    expected_len : int or None
        Required decoded length in bytes.

    Raises
    ------
    MinappDecryptError
        On empty input, malformed base64 or a length mismatch.
    """
    text = value.strip()
    if not text:
        raise MinappDecryptError(f"{name} is empty")
    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MinappDecryptError(f"{name} is not valid base64") from exc

    if expected_len is not None and len(data) != expected_len:
        raise MinappDecryptError(f"{name} must be {expected_len} bytes (got {len(data)})")
    return data
