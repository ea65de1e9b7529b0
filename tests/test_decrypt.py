from __future__ import annotations

import base64
import json

import pytest

from pyminapp._crypto.aes import aes_cbc_encrypt
from pyminapp.decrypt import PayloadDecryptor
from pyminapp.exceptions import MinappDecryptError
from pyminapp.session import Session

_ZERO_B64 = "AAAAAAAAAAAAAAAAAAAAAA=="
_PLAINTEXT = '{"openid":"o1","watermark":{"appid":"wx123","timestamp":1700000000}}'


def _encrypt(plaintext: str, key: bytes = b"\x00" * 16, iv: bytes = b"\x00" * 16) -> str:
    return base64.b64encode(aes_cbc_encrypt(plaintext.encode("utf-8"), key, iv)).decode("ascii")


def test_zero_key_fixture_decrypts_to_exact_record() -> None:
    ciphertext = _encrypt(_PLAINTEXT)

    payload = PayloadDecryptor("wx123").decrypt(_ZERO_B64, _ZERO_B64, ciphertext)

    assert payload.data == json.loads(_PLAINTEXT)
    assert payload.app_id == "wx123"
    assert payload.timestamp == 1700000000
    assert isinstance(payload.timestamp, int)


def test_same_ciphertext_with_other_app_id_is_rejected() -> None:
    ciphertext = _encrypt(_PLAINTEXT)

    with pytest.raises(MinappDecryptError, match="appid mismatch"):
        PayloadDecryptor("wx999").decrypt(_ZERO_B64, _ZERO_B64, ciphertext)


def test_raw_key_bytes_are_accepted() -> None:
    key = bytes(range(16))
    iv = bytes(range(16, 32))
    ciphertext = _encrypt(_PLAINTEXT, key, iv)

    payload = PayloadDecryptor("wx123").decrypt(key, iv, ciphertext)
    assert payload.data["openid"] == "o1"


def test_user_info_fields_are_mapped() -> None:
    record = {
        "nickName": "Band",
        "gender": 1,
        "language": "zh_CN",
        "city": "Guangzhou",
        "province": "Guangdong",
        "country": "CN",
        "avatarUrl": "http://example.invalid/a.png",
        "watermark": {"appid": "wx123", "timestamp": 1477314187},
    }
    ciphertext = _encrypt(json.dumps(record))

    user = PayloadDecryptor("wx123").decrypt_user_info(_ZERO_B64, _ZERO_B64, ciphertext)

    assert user.nickname == "Band"
    assert user.gender == 1
    assert user.avatar_url == "http://example.invalid/a.png"
    assert user.watermark.app_id == "wx123"


def test_phone_info_requires_its_fields() -> None:
    record = {"phoneNumber": "13580006666", "watermark": {"appid": "wx123", "timestamp": 1}}
    ciphertext = _encrypt(json.dumps(record))

    with pytest.raises(MinappDecryptError, match="PhoneInfo"):
        PayloadDecryptor("wx123").decrypt_phone_info(_ZERO_B64, _ZERO_B64, ciphertext)


def test_session_key_from_session_object() -> None:
    session = Session(openid="o1", session_key=_ZERO_B64)
    assert session.session_key_bytes() == b"\x00" * 16
    assert _ZERO_B64 not in repr(session)


@pytest.mark.parametrize(
    ("session_key", "iv", "ciphertext", "match"),
    [
        ("not base64!!", _ZERO_B64, "AAAA", "session_key is not valid base64"),
        (base64.b64encode(b"\x00" * 24).decode(), _ZERO_B64, "AAAA", "session_key must be 16 bytes"),
        (_ZERO_B64, base64.b64encode(b"\x00" * 8).decode(), "AAAA", "iv must be 16 bytes"),
        (_ZERO_B64, _ZERO_B64, "", "encrypted_data is empty"),
        (_ZERO_B64, _ZERO_B64, base64.b64encode(b"\x01" * 15).decode(), "multiple of 16"),
    ],
)
def test_malformed_inputs_raise_decrypt_error(session_key: str, iv: str, ciphertext: str, match: str) -> None:
    with pytest.raises(MinappDecryptError, match=match):
        PayloadDecryptor("wx123").decrypt(session_key, iv, ciphertext)


def test_wrong_key_fails_with_decrypt_error() -> None:
    ciphertext = _encrypt(_PLAINTEXT)
    wrong_key = base64.b64encode(b"\x01" * 16).decode()

    # Either the padding check or the JSON parse trips; both are DecryptErrors.
    with pytest.raises(MinappDecryptError):
        PayloadDecryptor("wx123").decrypt(wrong_key, _ZERO_B64, ciphertext)


def test_missing_watermark_is_rejected() -> None:
    ciphertext = _encrypt('{"openid":"o1"}')

    with pytest.raises(MinappDecryptError, match="no watermark"):
        PayloadDecryptor("wx123").decrypt(_ZERO_B64, _ZERO_B64, ciphertext)


def test_non_object_plaintext_is_rejected() -> None:
    ciphertext = _encrypt("[1, 2, 3]")

    with pytest.raises(MinappDecryptError, match="JSON object"):
        PayloadDecryptor("wx123").decrypt(_ZERO_B64, _ZERO_B64, ciphertext)
