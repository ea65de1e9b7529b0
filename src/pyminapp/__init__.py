"""pyminapp - Async Python client for the mini-program server API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyminapp")
except PackageNotFoundError:
    __version__ = "0+local"
from pyminapp.client import MinappClient
from pyminapp.config import MinappConfig
from pyminapp.credentials import CredentialExchanger
from pyminapp.decrypt import PayloadDecryptor
from pyminapp.exceptions import (
    MinappAccessTokenExpiredError,
    MinappApiError,
    MinappAuthError,
    MinappConfigError,
    MinappDecryptError,
    MinappError,
    MinappNetworkError,
    MinappRateLimitError,
    MinappTokenError,
)
from pyminapp.models import (
    AccessToken,
    DecryptedPayload,
    EnvVersion,
    MsgSecCheckResult,
    MsgSecScene,
    MsgSecSuggest,
    PhoneInfo,
    QrCode,
    ShortLink,
    TokenKind,
    UserInfo,
    Watermark,
)
from pyminapp.retry import Backoff, RetryPolicy, call_with_retry, is_retryable
from pyminapp.session import Session
from pyminapp.tokens import TokenRefresher, TokenStore

__all__ = [
    "__version__",
    "AccessToken",
    "Backoff",
    "CredentialExchanger",
    "DecryptedPayload",
    "EnvVersion",
    "MinappAccessTokenExpiredError",
    "MinappApiError",
    "MinappAuthError",
    "MinappClient",
    "MinappConfig",
    "MinappConfigError",
    "MinappDecryptError",
    "MinappError",
    "MinappNetworkError",
    "MinappRateLimitError",
    "MinappTokenError",
    "MsgSecCheckResult",
    "MsgSecScene",
    "MsgSecSuggest",
    "PayloadDecryptor",
    "PhoneInfo",
    "QrCode",
    "RetryPolicy",
    "Session",
    "ShortLink",
    "TokenKind",
    "TokenRefresher",
    "TokenStore",
    "UserInfo",
    "Watermark",
    "call_with_retry",
    "is_retryable",
]
