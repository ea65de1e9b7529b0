"""HTTP transport for the mini-program platform API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from pyminapp._constants import USER_AGENT
from pyminapp._redact import redact_for_log
from pyminapp.config import MinappConfig
from pyminapp.exceptions import MinappNetworkError

_logger = logging.getLogger(__name__)

#: ``(method, endpoint, request, response)`` trace hook; values are redacted.
TraceCallback = Callable[[str, str, dict[str, Any], Any], None]


class Transport(Protocol):
    """Structural platform API caller used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def call(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp-backed transport returning decoded JSON objects.

    Image responses (the QR code endpoints) are returned as
    ``{"buffer": <bytes>, "contentType": <str>}`` so callers keep a
    single result shape.
    """

    def __init__(
        self,
        config: MinappConfig,
        http_session: aiohttp.ClientSession,
        *,
        trace: TraceCallback | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)
        self._trace = trace if config.api_trace_enabled else None

    def _emit_trace(self, method: str, endpoint: str, request: dict[str, Any], response: Any) -> None:
        if self._trace is None:
            return
        try:
            self._trace(method, endpoint, redact_for_log(request), redact_for_log(response))
        except Exception:
            _logger.debug("API trace callback failed", exc_info=True)

    async def call(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON object.

        Raises
        ------
        MinappNetworkError
            On connection failure, timeout, a non-200 status, or a body
            that is not a JSON object.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = {
            "accept-encoding": "identity",
            "user-agent": USER_AGENT,
        }
        data: str | None = None
        if body is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            # Keep non-ASCII text (content checks, page titles) as UTF-8.
            data = json.dumps(body, ensure_ascii=False, separators=(",", ":"))

        request_log = {"params": dict(params or {}), "body": dict(body or {})}
        _logger.debug("%s %s request=%s", method, url, redact_for_log(request_log))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=data.encode("utf-8") if data is not None else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                content_type = resp.headers.get("Content-Type", "")
                raw = await resp.read()
                if resp.status != 200:
                    text = raw.decode("utf-8", errors="replace")
                    raise MinappNetworkError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except MinappNetworkError:
            raise
        except asyncio.TimeoutError as exc:
            raise MinappNetworkError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise MinappNetworkError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if content_type.startswith("image/"):
            result: dict[str, Any] = {"buffer": raw, "contentType": content_type.split(";")[0]}
            self._emit_trace(method, endpoint, request_log, result)
            return result

        text = raw.decode("utf-8", errors="replace")
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MinappNetworkError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(decoded, dict):
            raise MinappNetworkError(
                f"Expected a JSON object from {endpoint}, got {type(decoded).__name__}",
                endpoint=endpoint,
            )

        _logger.debug("%s %s response=%s", method, url, redact_for_log(decoded))
        self._emit_trace(method, endpoint, request_log, decoded)
        return decoded
