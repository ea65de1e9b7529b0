"""Access token cache with single-flight refresh.

:class:`TokenStore` owns the cached token for each :class:`TokenKind`.
A cache miss starts at most one refresh per kind; every caller that
arrives while it runs awaits the same task and sees the same outcome.
The refresh runs as its own task, shielded from its callers, so a caller
giving up does not abort the refresh for the others.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Protocol

from pyminapp._api.token import fetch_access_token, fetch_stable_access_token
from pyminapp._constants import DEFAULT_TOKEN_REFRESH_MARGIN
from pyminapp._transport import Transport
from pyminapp.config import MinappConfig
from pyminapp.exceptions import MinappTokenError
from pyminapp.models.token import AccessToken, TokenKind
from pyminapp.retry import RetryPolicy, call_with_retry

_logger = logging.getLogger(__name__)


class TokenIssuer(Protocol):
    """Anything that can obtain a fresh token from the platform."""

    async def issue(self, kind: TokenKind, *, force_refresh: bool = False) -> AccessToken:
        ...


class TokenRefresher:
    """Calls the token issuance endpoints through :func:`call_with_retry`.

    Parameters
    ----------
    config : MinappConfig
        Supplies the AppID/secret and the default retry policy.
    transport : Transport
        Platform API caller.
    policy : RetryPolicy or None
        Overrides ``config.retry``.
    """

    def __init__(
        self,
        config: MinappConfig,
        transport: Transport,
        *,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._policy = policy or config.retry

    async def issue(self, kind: TokenKind, *, force_refresh: bool = False) -> AccessToken:
        if kind is TokenKind.STABLE:
            return await call_with_retry(
                lambda: fetch_stable_access_token(self._config, self._transport, force_refresh=force_refresh),
                self._policy,
                description="stable token issue",
            )
        # The standard endpoint has no force flag: every call rotates the token.
        return await call_with_retry(
            lambda: fetch_access_token(self._config, self._transport),
            self._policy,
            description="standard token issue",
        )


class TokenStore:
    """Per-kind access token cache.

    Parameters
    ----------
    issuer : TokenIssuer
        Source of fresh tokens, usually a :class:`TokenRefresher`.
    refresh_margin : float
        Seconds before actual expiry at which a cached token is no
        longer handed out.
    default_kind : TokenKind
        Kind used when :meth:`get_token` is called without one.
    """

    def __init__(
        self,
        issuer: TokenIssuer,
        *,
        refresh_margin: float = DEFAULT_TOKEN_REFRESH_MARGIN,
        default_kind: TokenKind = TokenKind.STABLE,
    ) -> None:
        self._issuer = issuer
        self._refresh_margin = refresh_margin
        self._default_kind = default_kind
        self._tokens: dict[TokenKind, AccessToken] = {}
        self._inflight: dict[TokenKind, asyncio.Task[AccessToken]] = {}

    @property
    def default_kind(self) -> TokenKind:
        return self._default_kind

    def peek(self, kind: TokenKind | None = None) -> AccessToken | None:
        """Return the cached token if it is still usable, without refreshing."""
        token = self._tokens.get(kind or self._default_kind)
        if token is None or token.is_expired(self._refresh_margin):
            return None
        return token

    def is_refreshing(self, kind: TokenKind | None = None) -> bool:
        return (kind or self._default_kind) in self._inflight

    def set_token(self, token: AccessToken) -> None:
        """Store a token obtained elsewhere (e.g. from a shared cache)."""
        self._tokens[token.kind] = token

    def invalidate(self, kind: TokenKind | None = None) -> None:
        """Drop the cached token so the next :meth:`get_token` refreshes.

        A refresh already in flight is left alone.
        """
        self._tokens.pop(kind or self._default_kind, None)

    async def get_token(self, kind: TokenKind | None = None, *, force_refresh: bool = False) -> AccessToken:
        """Return a valid token, refreshing it at most once concurrently.

        Parameters
        ----------
        kind : TokenKind or None
            Token flavour; defaults to the store's ``default_kind``.
        force_refresh : bool
            Skip the cache and refresh.  If a refresh is already running
            its result is shared instead of starting another one.

        Raises
        ------
        MinappTokenError
            If the refresh failed; the platform or transport error is
            chained as ``__cause__``.
        """
        kind = kind or self._default_kind
        if not force_refresh:
            token = self.peek(kind)
            if token is not None:
                return token

        task = self._inflight.get(kind)
        if task is None:
            # No await between the lookup and the insert: check-and-set is atomic on the loop.
            task = asyncio.create_task(self._refresh(kind, force_refresh), name=f"pyminapp-refresh-{kind.value}")
            self._inflight[kind] = task
            task.add_done_callback(functools.partial(self._refresh_done, kind))
        else:
            _logger.debug("Joining in-flight %s token refresh", kind.value)
        return await asyncio.shield(task)

    async def _refresh(self, kind: TokenKind, force_refresh: bool) -> AccessToken:
        _logger.info("Refreshing %s access token (force_refresh=%s)", kind.value, force_refresh)
        try:
            token = await self._issuer.issue(kind, force_refresh=force_refresh)
        except Exception as exc:
            raise MinappTokenError(f"Could not obtain {kind.value} access token: {exc}", kind=kind.value) from exc
        finally:
            if self._inflight.get(kind) is asyncio.current_task():
                del self._inflight[kind]
        self._tokens[kind] = token
        _logger.debug("Cached %s access token, expires_at=%s", kind.value, token.expires_at.isoformat())
        return token

    def _refresh_done(self, kind: TokenKind, task: asyncio.Task[AccessToken]) -> None:
        if self._inflight.get(kind) is task:
            del self._inflight[kind]
        if task.cancelled():
            return
        # Retrieve the exception so an unobserved failure is not reported as "never retrieved".
        exc = task.exception()
        if exc is not None:
            _logger.warning("%s access token refresh failed: %s", kind.value, exc)
