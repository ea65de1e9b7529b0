"""Decrypted user payload models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyminapp.models._base import MinappBaseModel


class Watermark(MinappBaseModel):
    """Authenticity marker embedded in every decrypted payload.

    Parameters
    ----------
    app_id : str
        AppID the payload was issued for (JSON key ``appid``).
    timestamp : int
        Issuance time, epoch seconds.
    """

    app_id: str = Field(alias="appid")
    timestamp: int


class DecryptedPayload(MinappBaseModel):
    """A decrypted, watermark-validated plaintext record.

    ``data`` holds the full decoded JSON object exactly as the platform
    encrypted it, watermark included.
    """

    watermark: Watermark
    data: dict[str, Any]

    @property
    def app_id(self) -> str:
        return self.watermark.app_id

    @property
    def timestamp(self) -> int:
        return self.watermark.timestamp


class UserInfo(MinappBaseModel):
    """Profile returned by ``wx.getUserInfo`` once decrypted.

    ``gender`` is ``0`` unknown, ``1`` male, ``2`` female.
    """

    nickname: str = Field(default="", alias="nickName")
    gender: int = 0
    language: str = ""
    city: str = ""
    province: str = ""
    country: str = ""
    avatar_url: str = Field(default="", alias="avatarUrl")
    open_id: str | None = Field(default=None, alias="openId")
    union_id: str | None = Field(default=None, alias="unionId")
    watermark: Watermark


class PhoneInfo(MinappBaseModel):
    """Phone number record (decrypted or from ``getuserphonenumber``)."""

    phone_number: str = Field(alias="phoneNumber")
    pure_phone_number: str = Field(alias="purePhoneNumber")
    country_code: str = Field(alias="countryCode")
    watermark: Watermark
