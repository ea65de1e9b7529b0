"""Cryptographic primitives for mini-program payloads."""

from __future__ import annotations

from pyminapp._crypto.aes import aes_cbc_decrypt, aes_cbc_encrypt
from pyminapp._crypto.encoding import decode_b64
from pyminapp._crypto.hashing import hmac_sha256_hex

__all__ = [
    "aes_cbc_decrypt",
    "aes_cbc_encrypt",
    "decode_b64",
    "hmac_sha256_hex",
]
