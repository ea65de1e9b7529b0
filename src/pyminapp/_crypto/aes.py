"""AES-128-CBC with PKCS#7 padding for platform-encrypted user data."""

from __future__ import annotations

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from pyminapp.exceptions import MinappDecryptError

AES_KEY_SIZE = 16
AES_BLOCK_SIZE = 16


def _check_lengths(key: bytes, iv: bytes) -> None:
    if len(key) != AES_KEY_SIZE:
        raise MinappDecryptError(f"AES key must be {AES_KEY_SIZE} bytes (got {len(key)})")
    if len(iv) != AES_BLOCK_SIZE:
        raise MinappDecryptError(f"AES iv must be {AES_BLOCK_SIZE} bytes (got {len(iv)})")


def aes_cbc_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """AES-128-CBC encrypt with PKCS#7 padding.

    Mirrors what the platform does before handing data to the client;
    mainly useful to build fixtures.

    Raises
    ------
    MinappDecryptError
        If the key or iv has the wrong length.
    """
    _check_lengths(key, iv)
    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """AES-128-CBC decrypt and strip PKCS#7 padding.

    Parameters
    ----------
    ciphertext : bytes
        Raw ciphertext, a non-empty multiple of 16 bytes.
    key : bytes
        16-byte session key.
    iv : bytes
        16-byte initialization vector.

    Returns
    -------
    bytes
        Unpadded plaintext.

    Raises
    ------
    MinappDecryptError
        On a length problem or invalid padding (usually the wrong key).
    """
    _check_lengths(key, iv)
    if not ciphertext or len(ciphertext) % AES_BLOCK_SIZE != 0:
        raise MinappDecryptError(
            f"AES ciphertext length must be a non-zero multiple of {AES_BLOCK_SIZE} (got {len(ciphertext)})"
        )
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise MinappDecryptError(f"AES decryption failed: {exc}") from exc
