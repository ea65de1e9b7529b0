"""Custom exception hierarchy for pyminapp."""

from __future__ import annotations


class MinappError(Exception):
    """Base exception for all pyminapp errors."""


class MinappConfigError(MinappError):
    """Invalid or missing configuration."""


class MinappDecryptError(MinappError):
    """Encrypted payload could not be decrypted or failed its integrity check."""


class MinappNetworkError(MinappError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MinappApiError(MinappError):
    """Platform returned a non-zero ``errcode`` (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: int = 0,
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class MinappRateLimitError(MinappApiError):
    """Platform quota or frequency limit reached (e.g. ``45009``, ``45011``)."""


class MinappAuthError(MinappApiError):
    """Login code or application credentials rejected.

    Covers invalid, expired or already consumed login codes
    (``40029``, ``40163``, ``40226``) as well as a wrong app id or secret.
    Never retried.
    """


class MinappAccessTokenExpiredError(MinappAuthError):
    """Access token rejected by the platform.

    Raised for ``40001``, ``40014`` and ``42001``.  The client catches
    this internally, drops the cached token and retries the call once.
    """


class MinappTokenError(MinappError):
    """An access token could not be obtained.

    The underlying failure is available as ``__cause__``.
    """

    def __init__(self, message: str, *, kind: str = "") -> None:
        self.kind = kind
        super().__init__(message)
