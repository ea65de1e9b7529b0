"""Unlimited mini-program code endpoint.

Endpoint:
  - POST /wxa/getwxacodeunlimit

On success the platform answers with the image itself; on failure it
answers with an ``errcode`` JSON body.
"""

from __future__ import annotations

from typing import Any

from pyminapp._api._common import parse_response
from pyminapp._constants import UNLIMITED_QRCODE_ENDPOINT
from pyminapp._transport import Transport
from pyminapp.models.passthrough import EnvVersion, QrCode

_MAX_SCENE_LENGTH = 32
_MIN_WIDTH = 280
_MAX_WIDTH = 1280


def build_unlimited_qrcode_body(
    scene: str,
    *,
    page: str | None = None,
    check_path: bool = True,
    env_version: EnvVersion = EnvVersion.RELEASE,
    width: int = 430,
    auto_color: bool = False,
    line_color: tuple[int, int, int] | None = None,
    is_hyaline: bool = False,
) -> dict[str, Any]:
    """Validate arguments and build the request body.

    Raises
    ------
    ValueError
        If *scene* is empty or longer than 32 characters, *page* starts
        with ``/``, or *width* is outside 280-1280.
    """
    if not scene:
        raise ValueError("scene must not be empty")
    if len(scene) > _MAX_SCENE_LENGTH:
        raise ValueError(f"scene must be at most {_MAX_SCENE_LENGTH} characters, got {len(scene)}")
    if page is not None and page.startswith("/"):
        raise ValueError("page must not start with '/'")
    if not _MIN_WIDTH <= width <= _MAX_WIDTH:
        raise ValueError(f"width must be between {_MIN_WIDTH} and {_MAX_WIDTH}, got {width}")

    body: dict[str, Any] = {
        "scene": scene,
        "check_path": check_path,
        "env_version": env_version.value,
        "width": width,
        "auto_color": auto_color,
        "is_hyaline": is_hyaline,
    }
    if page is not None:
        body["page"] = page
    if line_color is not None:
        r, g, b = line_color
        body["line_color"] = {"r": r, "g": g, "b": b}
    return body


async def get_unlimited_qrcode(
    transport: Transport,
    access_token: str,
    body: dict[str, Any],
) -> QrCode:
    response = await transport.call(
        "POST",
        UNLIMITED_QRCODE_ENDPOINT,
        params={"access_token": access_token},
        body=body,
    )
    return parse_response(UNLIMITED_QRCODE_ENDPOINT, response, QrCode)
