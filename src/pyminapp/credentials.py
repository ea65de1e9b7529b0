"""Login code to session exchange."""

from __future__ import annotations

import logging

from pyminapp._api.auth import code2session
from pyminapp._constants import CODE2SESSION_ENDPOINT
from pyminapp._transport import Transport
from pyminapp.config import MinappConfig
from pyminapp.exceptions import MinappAuthError
from pyminapp.session import Session

_logger = logging.getLogger(__name__)


class CredentialExchanger:
    """Exchanges ``wx.login`` codes for :class:`Session` objects.

    Codes are single-use, so every :meth:`exchange` makes exactly one
    remote call: nothing is cached and nothing is retried.  A retry after
    a lost response would only find the code already consumed.
    """

    def __init__(self, config: MinappConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def exchange(self, login_code: str) -> Session:
        """Exchange *login_code* for the user's session.

        Raises
        ------
        MinappAuthError
            If the code is empty, invalid, expired or already consumed.
        MinappNetworkError
            On transport failure or a malformed response.
        """
        code = login_code.strip() if isinstance(login_code, str) else ""
        if not code:
            raise MinappAuthError("login code is empty", endpoint=CODE2SESSION_ENDPOINT)

        response = await code2session(self._config, self._transport, code)
        session = Session.from_response(response)
        _logger.debug("Exchanged login code for openid=%s unionid=%s", session.openid, session.unionid)
        return session
