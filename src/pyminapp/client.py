"""High-level async client for the mini-program server API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp

from pyminapp._api import auth as _auth_api
from pyminapp._api import links as _links_api
from pyminapp._api import phone as _phone_api
from pyminapp._api import qrcode as _qrcode_api
from pyminapp._api import security as _security_api
from pyminapp._constants import INVALID_SIGNATURE_CODE
from pyminapp._transport import HttpTransport, TraceCallback, Transport
from pyminapp.config import MinappConfig
from pyminapp.credentials import CredentialExchanger
from pyminapp.decrypt import PayloadDecryptor
from pyminapp.exceptions import MinappAccessTokenExpiredError, MinappAuthError, MinappError
from pyminapp.models.passthrough import EnvVersion, MsgSecCheckResult, MsgSecScene, QrCode, ShortLink
from pyminapp.models.token import AccessToken, TokenKind
from pyminapp.models.user import DecryptedPayload, PhoneInfo, UserInfo
from pyminapp.retry import call_with_retry
from pyminapp.session import Session
from pyminapp.tokens import TokenRefresher, TokenStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class MinappClient:
    """Async client for the mini-program server API.

    Usage::

        async with MinappClient(config) as client:
            session = await client.login(code)
            user = client.decrypt_user_info(session, encrypted_data, iv)

    Parameters
    ----------
    config : MinappConfig
        Client configuration.
    session : aiohttp.ClientSession or None
        HTTP session to reuse.  When omitted the client creates one and
        closes it on exit.
    transport : Transport or None
        Platform API caller replacing the built-in aiohttp transport.
    token_store : TokenStore or None
        Share a token cache between clients of the same AppID.
    on_api_trace : callable or None
        Receives redacted request/response pairs when
        ``config.api_trace_enabled`` is set.
    """

    def __init__(
        self,
        config: MinappConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        token_store: TokenStore | None = None,
        on_api_trace: TraceCallback | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._on_api_trace = on_api_trace
        self._token_store = token_store
        self._exchanger: CredentialExchanger | None = None
        self._decryptor = PayloadDecryptor(config.app_id)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MinappClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session, trace=self._on_api_trace)
        if self._token_store is None:
            self._token_store = TokenStore(
                TokenRefresher(self._config, self._transport),
                refresh_margin=self._config.token_refresh_margin,
                default_kind=self._config.token_kind,
            )
        self._exchanger = CredentialExchanger(self._config, self._transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None
        self._exchanger = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise MinappError("Client not initialized. Use 'async with MinappClient(...) as client:'")
        return self._transport

    def _require_token_store(self) -> TokenStore:
        if self._token_store is None:
            raise MinappError("Client not initialized. Use 'async with MinappClient(...) as client:'")
        return self._token_store

    async def _call_with_token(self, description: str, fn: Callable[[str], Awaitable[T]]) -> T:
        """Run a token-authenticated call with retry, refreshing once on token rejection.

        A rejected token only triggers a forced refresh while it is still
        the cached one.  If a concurrent caller already replaced it, the
        call is retried with the replacement instead.
        """
        store = self._require_token_store()

        async def attempt(token: AccessToken) -> T:
            return await call_with_retry(lambda: fn(token.value), self._config.retry, description=description)

        used = await store.get_token()
        try:
            return await attempt(used)
        except MinappAccessTokenExpiredError:
            current = store.peek()
            if current is None or current.value == used.value:
                _logger.info("%s: access token rejected, refreshing and retrying once", description)
                store.invalidate()
                fresh = await store.get_token(force_refresh=True)
            else:
                _logger.info("%s: access token rejected, retrying once with the already refreshed token", description)
                fresh = current
            return await attempt(fresh)

    # ------------------------------------------------------------------
    # Access tokens
    # ------------------------------------------------------------------

    @property
    def token_store(self) -> TokenStore:
        return self._require_token_store()

    async def get_access_token(self, kind: TokenKind | None = None, *, force_refresh: bool = False) -> AccessToken:
        """Return a valid access token, refreshing it when needed."""
        return await self._require_token_store().get_token(kind, force_refresh=force_refresh)

    def invalidate_access_token(self, kind: TokenKind | None = None) -> None:
        """Force token invalidation (next call will refresh)."""
        self._require_token_store().invalidate(kind)

    # ------------------------------------------------------------------
    # Login and user data
    # ------------------------------------------------------------------

    async def login(self, code: str) -> Session:
        """Exchange a ``wx.login`` code for the user's :class:`Session`."""
        self._require_transport()
        assert self._exchanger is not None  # noqa: S101
        return await self._exchanger.exchange(code)

    def decrypt(self, session: Session | str | bytes, encrypted_data: str, iv: str) -> DecryptedPayload:
        """Decrypt any payload encrypted with *session*'s key."""
        return self._decryptor.decrypt(_session_key(session), iv, encrypted_data)

    def decrypt_user_info(self, session: Session | str | bytes, encrypted_data: str, iv: str) -> UserInfo:
        return self._decryptor.decrypt_user_info(_session_key(session), iv, encrypted_data)

    def decrypt_phone_info(self, session: Session | str | bytes, encrypted_data: str, iv: str) -> PhoneInfo:
        return self._decryptor.decrypt_phone_info(_session_key(session), iv, encrypted_data)

    async def get_phone_number(self, code: str, *, openid: str | None = None) -> PhoneInfo:
        """Exchange a phone-number button code for the user's phone number."""
        transport = self._require_transport()
        return await self._call_with_token(
            "getuserphonenumber",
            lambda token: _phone_api.get_phone_number(transport, token, code, openid=openid),
        )

    async def check_session_key(self, session: Session) -> bool:
        """Return ``True`` while the platform still accepts *session*'s key.

        Any platform error other than a stale key (``87009``) propagates.
        """
        transport = self._require_transport()
        try:
            await self._call_with_token(
                "checksession",
                lambda token: _auth_api.check_session_key(transport, token, session.openid, session.session_key),
            )
        except MinappAuthError as exc:
            if exc.code == INVALID_SIGNATURE_CODE:
                return False
            raise
        return True

    async def reset_session_key(self, session: Session) -> Session:
        """Rotate *session*'s key and return the updated session."""
        transport = self._require_transport()
        response = await self._call_with_token(
            "resetusersessionkey",
            lambda token: _auth_api.reset_session_key(transport, token, session.openid, session.session_key),
        )
        return Session(openid=response.openid, session_key=response.session_key, unionid=session.unionid)

    # ------------------------------------------------------------------
    # Pass-through calls
    # ------------------------------------------------------------------

    async def get_unlimited_qrcode(
        self,
        scene: str,
        *,
        page: str | None = None,
        check_path: bool = True,
        env_version: EnvVersion = EnvVersion.RELEASE,
        width: int = 430,
        auto_color: bool = False,
        line_color: tuple[int, int, int] | None = None,
        is_hyaline: bool = False,
    ) -> QrCode:
        """Generate a mini-program code image for *scene*."""
        transport = self._require_transport()
        body = _qrcode_api.build_unlimited_qrcode_body(
            scene,
            page=page,
            check_path=check_path,
            env_version=env_version,
            width=width,
            auto_color=auto_color,
            line_color=line_color,
            is_hyaline=is_hyaline,
        )
        return await self._call_with_token(
            "getwxacodeunlimit",
            lambda token: _qrcode_api.get_unlimited_qrcode(transport, token, body),
        )

    async def generate_short_link(
        self,
        page_url: str,
        *,
        page_title: str | None = None,
        is_permanent: bool = False,
    ) -> ShortLink:
        """Generate a short link opening *page_url*."""
        transport = self._require_transport()
        body = _links_api.build_short_link_body(page_url, page_title=page_title, is_permanent=is_permanent)
        return await self._call_with_token(
            "genwxashortlink",
            lambda token: _links_api.generate_short_link(transport, token, body),
        )

    async def msg_sec_check(
        self,
        content: str,
        openid: str,
        scene: MsgSecScene = MsgSecScene.COMMENT,
        *,
        title: str | None = None,
        nickname: str | None = None,
        signature: str | None = None,
    ) -> MsgSecCheckResult:
        """Run the platform's text content check on *content*."""
        transport = self._require_transport()
        body = _security_api.build_msg_sec_check_body(
            content,
            openid,
            scene,
            title=title,
            nickname=nickname,
            signature=signature,
        )
        return await self._call_with_token(
            "msg_sec_check",
            lambda token: _security_api.msg_sec_check(transport, token, body),
        )


def _session_key(session: Session | str | bytes) -> str | bytes:
    if isinstance(session, Session):
        return session.session_key
    return session
