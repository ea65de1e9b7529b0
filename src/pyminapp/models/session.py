"""Login code exchange response model."""

from __future__ import annotations

from pydantic import Field

from pyminapp.models._base import MinappBaseModel


class Code2SessionResponse(MinappBaseModel):
    """Body returned by ``/sns/jscode2session`` and ``/wxa/resetusersessionkey``."""

    openid: str = Field(min_length=1)
    session_key: str = Field(min_length=1, repr=False)
    unionid: str | None = None
