from __future__ import annotations

from pyminapp._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "errcode": 0,
        "openid": "o1",
        "session_key": "tiihtNczf5v6AKRyjwEUhQ==",
        "params": {"appid": "wx123", "secret": "s3cret", "js_code": "0816abc"},
        "body": {"encryptedData": "deadbeef", "iv": "r7BXXKkLb8qrSNn05n0qiA=="},
    }

    redacted = redact_for_log(payload)
    assert redacted["openid"] == "o1"
    assert redacted["session_key"] == "<redacted>"
    assert redacted["params"]["appid"] == "wx123"
    assert redacted["params"]["secret"] == "<redacted>"
    assert redacted["params"]["js_code"] == "<redacted>"
    assert redacted["body"]["encryptedData"] == "<redacted>"
    assert redacted["body"]["iv"] == "<redacted>"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_summarises_bytes() -> None:
    assert redact_for_log([b"\x89PNG"]) == ["<bytes:4b>"]


def test_redact_for_log_matches_keys_exactly() -> None:
    record = {
        "Code": "keep",
        "IV": "keep",
        "errcode": -1,
        "detail": [{"strategy": "keyword", "code": "0816abc", "iv": "r7BXXKkLb8qrSNn05n0qiA=="}],
    }

    redacted = redact_for_log(record)
    assert redacted["Code"] == "keep"
    assert redacted["IV"] == "keep"
    assert redacted["errcode"] == -1
    assert redacted["detail"] == [{"strategy": "keyword", "code": "<redacted>", "iv": "<redacted>"}]
