"""Login and session-key endpoints.

Endpoints:
  - GET /sns/jscode2session
  - GET /wxa/checksession
  - GET /wxa/resetusersessionkey
"""

from __future__ import annotations

from pyminapp._api._common import parse_response, raise_for_errcode
from pyminapp._constants import CHECK_SESSION_ENDPOINT, CODE2SESSION_ENDPOINT, RESET_SESSION_KEY_ENDPOINT
from pyminapp._crypto.hashing import hmac_sha256_hex
from pyminapp._transport import Transport
from pyminapp.config import MinappConfig
from pyminapp.models.session import Code2SessionResponse


async def code2session(config: MinappConfig, transport: Transport, js_code: str) -> Code2SessionResponse:
    """Exchange a ``wx.login`` code for ``openid`` and ``session_key``.

    Raises
    ------
    MinappAuthError
        If the code is invalid, expired or already used.
    MinappNetworkError
        On transport failure or a malformed response.
    """
    params = {
        "appid": config.app_id,
        "secret": config.secret,
        "js_code": js_code,
        "grant_type": "authorization_code",
    }
    response = await transport.call("GET", CODE2SESSION_ENDPOINT, params=params)
    return parse_response(CODE2SESSION_ENDPOINT, response, Code2SessionResponse)


def _signed_params(access_token: str, openid: str, session_key: str) -> dict[str, str]:
    return {
        "access_token": access_token,
        "openid": openid,
        "signature": hmac_sha256_hex(session_key, b""),
        "sig_method": "hmac_sha256",
    }


async def check_session_key(
    transport: Transport,
    access_token: str,
    openid: str,
    session_key: str,
) -> None:
    """Verify the server still considers *session_key* current for *openid*.

    Raises
    ------
    MinappAuthError
        With ``code == 87009`` when the key is stale or wrong.
    """
    response = await transport.call(
        "GET",
        CHECK_SESSION_ENDPOINT,
        params=_signed_params(access_token, openid, session_key),
    )
    raise_for_errcode(CHECK_SESSION_ENDPOINT, response)


async def reset_session_key(
    transport: Transport,
    access_token: str,
    openid: str,
    session_key: str,
) -> Code2SessionResponse:
    """Rotate the user's session key, returning the new one."""
    response = await transport.call(
        "GET",
        RESET_SESSION_KEY_ENDPOINT,
        params=_signed_params(access_token, openid, session_key),
    )
    return parse_response(RESET_SESSION_KEY_ENDPOINT, response, Code2SessionResponse)
