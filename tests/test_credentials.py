from __future__ import annotations

import pytest

from pyminapp.config import MinappConfig
from pyminapp.credentials import CredentialExchanger
from pyminapp.exceptions import MinappAuthError, MinappNetworkError


class _RecordingTransport:
    def __init__(self, response: dict[str, object] | Exception) -> None:
        self._response = response
        self.calls: list[tuple[str, str, dict | None]] = []

    async def call(self, method: str, endpoint: str, *, params=None, body=None) -> dict[str, object]:
        self.calls.append((method, endpoint, params))
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


def _config() -> MinappConfig:
    return MinappConfig(app_id="wx123", secret="s3cret")


@pytest.mark.asyncio
async def test_exchange_returns_session_verbatim() -> None:
    transport = _RecordingTransport({"openid": "o1", "session_key": "tiihtNczf5v6AKRyjwEUhQ==", "unionid": "u1"})

    session = await CredentialExchanger(_config(), transport).exchange("0816abc123def456")

    assert session.openid == "o1"
    assert session.session_key == "tiihtNczf5v6AKRyjwEUhQ=="
    assert session.unionid == "u1"
    assert transport.calls == [
        (
            "GET",
            "/sns/jscode2session",
            {"appid": "wx123", "secret": "s3cret", "js_code": "0816abc123def456", "grant_type": "authorization_code"},
        )
    ]


@pytest.mark.asyncio
async def test_exchange_without_unionid() -> None:
    transport = _RecordingTransport({"openid": "o1", "session_key": "tiihtNczf5v6AKRyjwEUhQ=="})

    session = await CredentialExchanger(_config(), transport).exchange("code")

    assert session.unionid is None


@pytest.mark.asyncio
@pytest.mark.parametrize("errcode", [40029, 40163, 40226])
async def test_rejected_code_raises_auth_error(errcode: int) -> None:
    transport = _RecordingTransport({"errcode": errcode, "errmsg": "invalid code"})

    with pytest.raises(MinappAuthError) as exc_info:
        await CredentialExchanger(_config(), transport).exchange("used-code")

    assert exc_info.value.code == errcode
    assert exc_info.value.endpoint == "/sns/jscode2session"


@pytest.mark.asyncio
async def test_transport_failure_is_not_retried() -> None:
    transport = _RecordingTransport(MinappNetworkError("timed out"))

    with pytest.raises(MinappNetworkError):
        await CredentialExchanger(_config(), transport).exchange("code")

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_empty_code_makes_no_remote_call() -> None:
    transport = _RecordingTransport({})

    with pytest.raises(MinappAuthError, match="empty"):
        await CredentialExchanger(_config(), transport).exchange("   ")

    assert transport.calls == []


@pytest.mark.asyncio
async def test_malformed_response_is_network_error() -> None:
    transport = _RecordingTransport({"errcode": 0, "openid": "o1"})

    with pytest.raises(MinappNetworkError, match="Malformed response"):
        await CredentialExchanger(_config(), transport).exchange("code")
