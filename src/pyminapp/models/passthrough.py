"""Records for opaque one-shot platform calls.

These calls keep no state; the models only give the caller typed
access to the documented fields, everything else stays in ``raw``.
"""

from __future__ import annotations

import enum

from pydantic import Field

from pyminapp.models._base import MinappBaseModel


class ShortLink(MinappBaseModel):
    """Result of ``/wxa/genwxashortlink``."""

    link: str


class QrCode(MinappBaseModel):
    """Image returned by ``/wxa/getwxacodeunlimit``."""

    buffer: bytes = Field(repr=False)
    content_type: str = Field(default="image/jpeg", alias="contentType")


class EnvVersion(enum.Enum):
    """Mini-program version a QR code opens."""

    RELEASE = "release"
    TRIAL = "trial"
    DEVELOP = "develop"


class MsgSecScene(enum.IntEnum):
    """Content-check scene."""

    PROFILE = 1
    COMMENT = 2
    FORUM = 3
    SOCIAL_LOG = 4


class MsgSecSuggest(enum.Enum):
    """Overall content-check verdict."""

    PASS = "pass"
    REVIEW = "review"
    RISKY = "risky"


class MsgSecResult(MinappBaseModel):
    suggest: MsgSecSuggest
    label: int


class MsgSecDetail(MinappBaseModel):
    strategy: str = ""
    errcode: int = 0
    suggest: MsgSecSuggest | None = None
    label: int | None = None
    keyword: str | None = None
    prob: int | None = None


class MsgSecCheckResult(MinappBaseModel):
    """Result of ``/wxa/msg_sec_check`` (version 2)."""

    result: MsgSecResult
    detail: list[MsgSecDetail] = Field(default_factory=list)
    trace_id: str = ""

    @property
    def is_pass(self) -> bool:
        return self.result.suggest is MsgSecSuggest.PASS

    def valid_details(self) -> list[MsgSecDetail]:
        """Per-strategy results that completed successfully."""
        return [d for d in self.detail if d.errcode == 0]
