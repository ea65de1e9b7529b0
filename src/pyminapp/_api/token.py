"""Access token issuance endpoints.

Endpoints:
  - GET  /cgi-bin/token         (standard token)
  - POST /cgi-bin/stable_token  (stable token, optional force refresh)
"""

from __future__ import annotations

import logging

from pyminapp._api._common import parse_response
from pyminapp._constants import STABLE_TOKEN_ENDPOINT, TOKEN_ENDPOINT
from pyminapp._transport import Transport
from pyminapp.config import MinappConfig
from pyminapp.models.token import AccessToken, AccessTokenResponse, TokenKind

_logger = logging.getLogger(__name__)


async def fetch_access_token(config: MinappConfig, transport: Transport) -> AccessToken:
    """Issue a standard access token.

    Issuing a new standard token invalidates the previous one after a
    short grace period, so callers should go through the token store.
    """
    params = {
        "grant_type": "client_credential",
        "appid": config.app_id,
        "secret": config.secret,
    }
    response = await transport.call("GET", TOKEN_ENDPOINT, params=params)
    parsed = parse_response(TOKEN_ENDPOINT, response, AccessTokenResponse)
    _logger.debug("Issued standard access token, expires_in=%ss", parsed.expires_in)
    return parsed.to_token(TokenKind.STANDARD)


async def fetch_stable_access_token(
    config: MinappConfig,
    transport: Transport,
    *,
    force_refresh: bool = False,
) -> AccessToken:
    """Issue (or re-read) the stable access token.

    Parameters
    ----------
    config : MinappConfig
        Client configuration.
    transport : Transport
        Platform API caller.
    force_refresh : bool
        Rotate the token server-side, invalidating the previous one.
        The platform limits how often this may be done per day.
    """
    body: dict[str, object] = {
        "grant_type": "client_credential",
        "appid": config.app_id,
        "secret": config.secret,
    }
    if force_refresh:
        body["force_refresh"] = True
    response = await transport.call("POST", STABLE_TOKEN_ENDPOINT, body=body)
    parsed = parse_response(STABLE_TOKEN_ENDPOINT, response, AccessTokenResponse)
    _logger.debug(
        "Issued stable access token, expires_in=%ss force_refresh=%s",
        parsed.expires_in,
        force_refresh,
    )
    return parsed.to_token(TokenKind.STABLE)
