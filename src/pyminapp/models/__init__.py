"""Data models for mini-program platform responses."""

from pyminapp.models.passthrough import (
    EnvVersion,
    MsgSecCheckResult,
    MsgSecDetail,
    MsgSecResult,
    MsgSecScene,
    MsgSecSuggest,
    QrCode,
    ShortLink,
)
from pyminapp.models.session import Code2SessionResponse
from pyminapp.models.token import AccessToken, AccessTokenResponse, TokenKind
from pyminapp.models.user import DecryptedPayload, PhoneInfo, UserInfo, Watermark

__all__ = [
    "AccessToken",
    "AccessTokenResponse",
    "Code2SessionResponse",
    "DecryptedPayload",
    "EnvVersion",
    "MsgSecCheckResult",
    "MsgSecDetail",
    "MsgSecResult",
    "MsgSecScene",
    "MsgSecSuggest",
    "PhoneInfo",
    "QrCode",
    "ShortLink",
    "TokenKind",
    "UserInfo",
    "Watermark",
]
