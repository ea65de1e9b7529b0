"""Phone number endpoint.

Endpoint:
  - POST /wxa/business/getuserphonenumber
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from pyminapp._api._common import parse_response
from pyminapp._constants import PHONE_NUMBER_ENDPOINT
from pyminapp._transport import Transport
from pyminapp.models.user import PhoneInfo


class _PhoneNumberResponse(BaseModel):
    phone_info: PhoneInfo


async def get_phone_number(
    transport: Transport,
    access_token: str,
    code: str,
    *,
    openid: str | None = None,
) -> PhoneInfo:
    """Exchange a ``getPhoneNumber`` button code for the user's phone number.

    Unlike the legacy encrypted flow the platform returns the record in
    clear over TLS; its watermark is not checked here.
    """
    body: dict[str, Any] = {"code": code}
    if openid:
        body["openid"] = openid
    response = await transport.call(
        "POST",
        PHONE_NUMBER_ENDPOINT,
        params={"access_token": access_token},
        body=body,
    )
    return parse_response(PHONE_NUMBER_ENDPOINT, response, _PhoneNumberResponse).phone_info
