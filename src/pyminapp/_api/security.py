"""Text content security check.

Endpoint:
  - POST /wxa/msg_sec_check  (version 2)
"""

from __future__ import annotations

from typing import Any

from pyminapp._api._common import parse_response
from pyminapp._constants import MSG_SEC_CHECK_ENDPOINT
from pyminapp._transport import Transport
from pyminapp.models.passthrough import MsgSecCheckResult, MsgSecScene

_MAX_CONTENT_LENGTH = 2500


def build_msg_sec_check_body(
    content: str,
    openid: str,
    scene: MsgSecScene,
    *,
    title: str | None = None,
    nickname: str | None = None,
    signature: str | None = None,
) -> dict[str, Any]:
    """Validate arguments and build the request body.

    ``signature`` is only accepted for :attr:`MsgSecScene.PROFILE`.
    """
    if not content:
        raise ValueError("content must not be empty")
    if len(content) > _MAX_CONTENT_LENGTH:
        raise ValueError(f"content must be at most {_MAX_CONTENT_LENGTH} characters, got {len(content)}")
    if not openid:
        raise ValueError("openid must not be empty")
    if signature is not None and scene is not MsgSecScene.PROFILE:
        raise ValueError(f"signature is only valid for scene={int(MsgSecScene.PROFILE)}, got scene={int(scene)}")

    body: dict[str, Any] = {
        "content": content,
        "version": 2,
        "scene": int(scene),
        "openid": openid,
    }
    if title is not None:
        body["title"] = title
    if nickname is not None:
        body["nickname"] = nickname
    if signature is not None:
        body["signature"] = signature
    return body


async def msg_sec_check(
    transport: Transport,
    access_token: str,
    body: dict[str, Any],
) -> MsgSecCheckResult:
    response = await transport.call(
        "POST",
        MSG_SEC_CHECK_ENDPOINT,
        params={"access_token": access_token},
        body=body,
    )
    return parse_response(MSG_SEC_CHECK_ENDPOINT, response, MsgSecCheckResult)
