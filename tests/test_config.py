from __future__ import annotations

import pytest

from pyminapp.config import MinappConfig
from pyminapp.exceptions import MinappConfigError
from pyminapp.models.token import TokenKind
from pyminapp.retry import Backoff, RetryPolicy


def test_defaults() -> None:
    config = MinappConfig(app_id="wx123", secret="s3cret")
    assert config.base_url == "https://api.weixin.qq.com"
    assert config.token_kind is TokenKind.STABLE
    assert config.token_refresh_margin == 300
    assert config.retry == RetryPolicy()
    assert "s3cret" not in repr(config)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"app_id": "", "secret": "s"},
        {"app_id": "wx123", "secret": "  "},
        {"app_id": "wx123", "secret": "s", "token_refresh_margin": -1},
        {"app_id": "wx123", "secret": "s", "request_timeout": 0},
        {"app_id": "wx123", "secret": "s", "token_kind": "weird"},
    ],
)
def test_invalid_config_is_fatal(kwargs: dict[str, object]) -> None:
    with pytest.raises(MinappConfigError):
        MinappConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINAPP_APP_ID", "wxenv")
    monkeypatch.setenv("MINAPP_SECRET", "envsecret")
    monkeypatch.setenv("MINAPP_TOKEN_KIND", "standard")
    monkeypatch.setenv("MINAPP_RETRY_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("MINAPP_RETRY_DELAY", "0.25")
    monkeypatch.setenv("MINAPP_RETRY_BACKOFF", "fixed")
    monkeypatch.setenv("MINAPP_TOKEN_REFRESH_MARGIN", "60")
    monkeypatch.setenv("MINAPP_API_TRACE_ENABLED", "yes")

    config = MinappConfig.from_env()

    assert config.app_id == "wxenv"
    assert config.secret == "envsecret"
    assert config.token_kind is TokenKind.STANDARD
    assert config.retry == RetryPolicy(max_attempts=5, delay=0.25, backoff=Backoff.FIXED)
    assert config.token_refresh_margin == 60.0
    assert config.api_trace_enabled is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINAPP_APP_ID", "wxenv")
    monkeypatch.setenv("MINAPP_SECRET", "envsecret")
    monkeypatch.setenv("MINAPP_TOKEN_REFRESH_MARGIN", "60")

    config = MinappConfig.from_env(app_id="wxoverride", token_refresh_margin=10, retry={"max_attempts": 1})

    assert config.app_id == "wxoverride"
    assert config.token_refresh_margin == 10
    assert config.retry.max_attempts == 1


def test_from_env_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MINAPP_APP_ID", raising=False)
    monkeypatch.delenv("MINAPP_SECRET", raising=False)

    with pytest.raises(MinappConfigError):
        MinappConfig.from_env()


def test_from_env_rejects_malformed_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINAPP_APP_ID", "wxenv")
    monkeypatch.setenv("MINAPP_SECRET", "envsecret")
    monkeypatch.setenv("MINAPP_RETRY_MAX_ATTEMPTS", "three")

    with pytest.raises(MinappConfigError, match="MINAPP_RETRY_MAX_ATTEMPTS"):
        MinappConfig.from_env()
