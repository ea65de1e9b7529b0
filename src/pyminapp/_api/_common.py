"""Shared helpers for platform endpoint modules.

This module centralizes the most repeated patterns:
- mapping the platform ``errcode`` to the exception hierarchy
- validating a response against its typed record

It is internal to pyminapp and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pyminapp._constants import ACCESS_TOKEN_EXPIRED_CODES, AUTH_ERROR_CODES, RATE_LIMIT_CODES
from pyminapp.exceptions import (
    MinappAccessTokenExpiredError,
    MinappApiError,
    MinappAuthError,
    MinappNetworkError,
    MinappRateLimitError,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _errcode(response: dict[str, Any], endpoint: str) -> int:
    raw = response.get("errcode", 0)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise MinappNetworkError(
            f"{endpoint} returned a non-numeric errcode: {raw!r}",
            endpoint=endpoint,
        ) from exc


def raise_for_errcode(endpoint: str, response: dict[str, Any]) -> None:
    """Raise the matching :class:`MinappApiError` subclass for a non-zero ``errcode``."""
    code = _errcode(response, endpoint)
    if code == 0:
        return
    message = f"{endpoint} failed: errcode={code} errmsg={response.get('errmsg', '')}"
    if code in ACCESS_TOKEN_EXPIRED_CODES:
        raise MinappAccessTokenExpiredError(message, code=code, endpoint=endpoint)
    if code in AUTH_ERROR_CODES:
        raise MinappAuthError(message, code=code, endpoint=endpoint)
    if code in RATE_LIMIT_CODES:
        raise MinappRateLimitError(message, code=code, endpoint=endpoint)
    raise MinappApiError(message, code=code, endpoint=endpoint)


def parse_response(endpoint: str, response: dict[str, Any], model: type[ModelT]) -> ModelT:
    """Check ``errcode`` then validate *response* as *model*.

    A response that passes the errcode check but does not match the
    record is reported as :class:`MinappNetworkError`: the platform
    returned something the client cannot use.
    """
    raise_for_errcode(endpoint, response)
    try:
        return model.model_validate(response)
    except ValidationError as exc:
        raise MinappNetworkError(
            f"Malformed response from {endpoint}: {exc.error_count()} invalid field(s)",
            endpoint=endpoint,
        ) from exc
