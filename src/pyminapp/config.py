"""Client configuration for pyminapp."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyminapp._constants import BASE_URL, DEFAULT_TOKEN_REFRESH_MARGIN
from pyminapp.exceptions import MinappConfigError
from pyminapp.models.token import TokenKind
from pyminapp.retry import Backoff, RetryPolicy


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Any, key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise MinappConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class MinappConfig:
    """Client configuration.

    Parameters
    ----------
    app_id : str
        Mini-program AppID.  Also the expected ``watermark.appid`` of
        every decrypted payload.
    secret : str
        Mini-program AppSecret.
    base_url : str
        Platform API base URL.
    token_kind : TokenKind
        Which access token flavour :class:`~pyminapp.client.MinappClient`
        uses by default.  The stable token is safer when several
        processes share one AppID.
    retry : RetryPolicy
        Retry settings applied to token issuance and token-authenticated
        calls.
    token_refresh_margin : float
        Seconds before actual expiry at which a cached token is treated
        as expired.
    request_timeout : float
        Total per-request timeout in seconds.
    api_trace_enabled : bool
        Enable transport-level request/response tracing callback.
    """

    app_id: str
    secret: str
    base_url: str = BASE_URL
    token_kind: TokenKind = TokenKind.STABLE
    retry: RetryPolicy = dataclasses.field(default_factory=RetryPolicy)
    token_refresh_margin: float = DEFAULT_TOKEN_REFRESH_MARGIN
    request_timeout: float = 10.0
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.app_id, str) or not self.app_id.strip():
            raise MinappConfigError("app_id is required")
        if not isinstance(self.secret, str) or not self.secret.strip():
            raise MinappConfigError("secret is required")
        if self.token_refresh_margin < 0:
            raise MinappConfigError(f"token_refresh_margin must be >= 0, got {self.token_refresh_margin}")
        if self.request_timeout <= 0:
            raise MinappConfigError(f"request_timeout must be > 0, got {self.request_timeout}")
        if not isinstance(self.token_kind, TokenKind):
            try:
                object.__setattr__(self, "token_kind", TokenKind(str(self.token_kind).strip().lower()))
            except ValueError as exc:
                raise MinappConfigError(f"unknown token_kind {self.token_kind!r}") from exc

    def __repr__(self) -> str:
        return (
            f"MinappConfig(app_id={self.app_id!r}, secret='********', base_url={self.base_url!r}, "
            f"token_kind={self.token_kind.value!r}, retry={self.retry!r})"
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> MinappConfig:
        """Create configuration from environment variables.

        Reads ``MINAPP_APP_ID``, ``MINAPP_SECRET`` and optional
        ``MINAPP_*`` variables.  Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MinappConfig
            Populated configuration.

        Raises
        ------
        MinappConfigError
            If a required value is missing or a numeric value is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "MINAPP_APP_ID": "app_id",
            "MINAPP_SECRET": "secret",
            "MINAPP_BASE_URL": "base_url",
            "MINAPP_TOKEN_KIND": "token_kind",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Retry options may come from env or a nested dict override
        retry_kwargs: dict[str, Any] = {}
        max_attempts = _env_number(env, "MINAPP_RETRY_MAX_ATTEMPTS", int)
        if max_attempts is not None:
            retry_kwargs["max_attempts"] = max_attempts
        delay = _env_number(env, "MINAPP_RETRY_DELAY", float)
        if delay is not None:
            retry_kwargs["delay"] = delay
        backoff = env.get("MINAPP_RETRY_BACKOFF")
        if backoff is not None:
            retry_kwargs["backoff"] = backoff

        retry_overrides = overrides.pop("retry", None)
        if isinstance(retry_overrides, dict):
            retry_kwargs.update(retry_overrides)
        elif isinstance(retry_overrides, RetryPolicy):
            retry_kwargs = dataclasses.asdict(retry_overrides)
        if retry_kwargs:
            retry_kwargs.setdefault("backoff", Backoff.EXPONENTIAL)
            config_kwargs["retry"] = RetryPolicy(**retry_kwargs)

        margin = _env_number(env, "MINAPP_TOKEN_REFRESH_MARGIN", float)
        if margin is not None and "token_refresh_margin" not in overrides:
            config_kwargs["token_refresh_margin"] = margin

        timeout = _env_number(env, "MINAPP_REQUEST_TIMEOUT", float)
        if timeout is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = timeout

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("MINAPP_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        if "app_id" not in config_kwargs or "secret" not in config_kwargs:
            raise MinappConfigError("MINAPP_APP_ID and MINAPP_SECRET must be set")

        return cls(**config_kwargs)
