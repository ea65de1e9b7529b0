"""Decryption and watermark validation of platform-encrypted user data.

The client receives ``encryptedData`` and ``iv`` from APIs such as
``wx.getUserInfo``; both are base64.  The plaintext is a JSON object
with a ``watermark`` naming the AppID it was issued for.  CBC carries no
authentication tag, so the watermark check is the only integrity
guarantee and is never skipped.
"""

from __future__ import annotations

import json
import logging
from typing import TypeVar

from pydantic import ValidationError

from pyminapp._crypto.aes import aes_cbc_decrypt
from pyminapp._crypto.encoding import decode_b64
from pyminapp.exceptions import MinappDecryptError
from pyminapp.models._base import MinappBaseModel
from pyminapp.models.user import DecryptedPayload, PhoneInfo, UserInfo, Watermark

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=MinappBaseModel)


def _key_material(value: str | bytes, name: str) -> bytes:
    # bytes are already decoded key material; str is base64 from the client
    if isinstance(value, bytes):
        if len(value) != 16:
            raise MinappDecryptError(f"{name} must be 16 bytes (got {len(value)})")
        return value
    return decode_b64(value, name=name, expected_len=16)


class PayloadDecryptor:
    """Decrypt payloads encrypted with a user's session key.

    Parameters
    ----------
    app_id : str
        Expected ``watermark.appid``; any other value is rejected.
    """

    def __init__(self, app_id: str) -> None:
        self._app_id = app_id

    @property
    def app_id(self) -> str:
        return self._app_id

    def decrypt(self, session_key: str | bytes, iv: str | bytes, ciphertext: str | bytes) -> DecryptedPayload:
        """Decrypt *ciphertext* and validate its watermark.

        Parameters
        ----------
        session_key : str or bytes
            Base64 session key, or the 16 decoded bytes.
        iv : str or bytes
            Base64 initialization vector, or the 16 decoded bytes.
        ciphertext : str or bytes
            Base64 ``encryptedData``.

        Returns
        -------
        DecryptedPayload
            The full decoded record plus its parsed watermark.

        Raises
        ------
        MinappDecryptError
            On malformed base64, a wrong key/iv length, a padding failure,
            a plaintext that is not a JSON object, a missing watermark,
            or a watermark AppID other than the configured one.
        """
        key = _key_material(session_key, "session_key")
        iv_bytes = _key_material(iv, "iv")
        data = decode_b64(ciphertext, name="encrypted_data")

        plaintext = aes_cbc_decrypt(data, key, iv_bytes)

        try:
            record = json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MinappDecryptError("Decrypted payload is not UTF-8 JSON (wrong session key?)") from exc
        if not isinstance(record, dict):
            raise MinappDecryptError(f"Decrypted payload must be a JSON object, got {type(record).__name__}")

        watermark_raw = record.get("watermark")
        if not isinstance(watermark_raw, dict):
            raise MinappDecryptError("Decrypted payload has no watermark")
        try:
            watermark = Watermark.model_validate(watermark_raw)
        except ValidationError as exc:
            raise MinappDecryptError("Decrypted payload has a malformed watermark") from exc

        if watermark.app_id != self._app_id:
            raise MinappDecryptError(
                f"Watermark appid mismatch: expected {self._app_id!r}, got {watermark.app_id!r}"
            )

        _logger.debug("Decrypted payload keys=%s watermark.timestamp=%s", sorted(record), watermark.timestamp)
        return DecryptedPayload(watermark=watermark, data=record, raw=record)

    def _decrypt_as(
        self,
        model: type[ModelT],
        session_key: str | bytes,
        iv: str | bytes,
        ciphertext: str | bytes,
    ) -> ModelT:
        payload = self.decrypt(session_key, iv, ciphertext)
        try:
            return model.model_validate(payload.data)
        except ValidationError as exc:
            raise MinappDecryptError(f"Decrypted payload is not a valid {model.__name__}") from exc

    def decrypt_user_info(self, session_key: str | bytes, iv: str | bytes, ciphertext: str | bytes) -> UserInfo:
        """Decrypt a ``wx.getUserInfo`` payload."""
        return self._decrypt_as(UserInfo, session_key, iv, ciphertext)

    def decrypt_phone_info(self, session_key: str | bytes, iv: str | bytes, ciphertext: str | bytes) -> PhoneInfo:
        """Decrypt a legacy ``getPhoneNumber`` payload."""
        return self._decrypt_as(PhoneInfo, session_key, iv, ciphertext)
