"""Short link endpoint.

Endpoint:
  - POST /wxa/genwxashortlink
"""

from __future__ import annotations

from typing import Any

from pyminapp._api._common import parse_response
from pyminapp._constants import SHORT_LINK_ENDPOINT
from pyminapp._transport import Transport
from pyminapp.models.passthrough import ShortLink

_MAX_PAGE_URL_LENGTH = 1024


def build_short_link_body(
    page_url: str,
    *,
    page_title: str | None = None,
    is_permanent: bool = False,
) -> dict[str, Any]:
    """Validate arguments and build the request body."""
    if not page_url:
        raise ValueError("page_url must not be empty")
    if len(page_url) > _MAX_PAGE_URL_LENGTH:
        raise ValueError(f"page_url must be at most {_MAX_PAGE_URL_LENGTH} characters, got {len(page_url)}")
    body: dict[str, Any] = {"page_url": page_url, "is_permanent": is_permanent}
    if page_title is not None:
        body["page_title"] = page_title
    return body


async def generate_short_link(
    transport: Transport,
    access_token: str,
    body: dict[str, Any],
) -> ShortLink:
    response = await transport.call(
        "POST",
        SHORT_LINK_ENDPOINT,
        params={"access_token": access_token},
        body=body,
    )
    return parse_response(SHORT_LINK_ENDPOINT, response, ShortLink)
