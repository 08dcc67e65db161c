from __future__ import annotations

import pytest

from llegapo.config import DEFAULT_USER_AGENTS, DEPLOYMENT, INTERACTIVE, Settings

ENV_VARS = (
    "RED_BASE_URL",
    "RED_DEPLOYMENT_MODE",
    "APP_ENV",
    "RED_JWT_TOKEN",
    "RED_TIMEOUT_S",
    "RED_TOKEN_TTL_S",
    "RED_TOKEN_STRATEGY_ORDER",
    "RED_USER_AGENTS",
    "RED_DEGRADED_BACKOFF_S",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.base_url == "https://www.red.cl"
    assert settings.mode == INTERACTIVE
    assert settings.is_deployment is False
    assert settings.provisioned_token is None
    assert settings.timeout_s == 10.0
    assert settings.token_ttl_s == 300.0
    assert settings.deployment_strategy_order == ("env", "redirect")
    assert settings.user_agents == DEFAULT_USER_AGENTS
    assert settings.degraded_backoff_s == 1.5


def test_production_app_env_selects_deployment_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")

    settings = Settings()

    assert settings.mode == DEPLOYMENT
    assert settings.token_ttl_s == 1800.0


def test_explicit_mode_wins_over_app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("RED_DEPLOYMENT_MODE", "Interactive")

    assert Settings().mode == INTERACTIVE


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RED_BASE_URL", "https://red.test/")
    monkeypatch.setenv("RED_DEPLOYMENT_MODE", "deployment")
    monkeypatch.setenv("RED_JWT_TOKEN", "  token-from-env  ")
    monkeypatch.setenv("RED_TIMEOUT_S", "4.5")
    monkeypatch.setenv("RED_TOKEN_TTL_S", "60")
    monkeypatch.setenv("RED_TOKEN_STRATEGY_ORDER", "redirect, env")
    monkeypatch.setenv("RED_USER_AGENTS", "agent-a; agent-b;")
    monkeypatch.setenv("RED_DEGRADED_BACKOFF_S", "0")

    settings = Settings()

    assert settings.base_url == "https://red.test"
    assert settings.is_deployment is True
    assert settings.provisioned_token == "token-from-env"
    assert settings.timeout_s == 4.5
    assert settings.token_ttl_s == 60.0
    assert settings.deployment_strategy_order == ("redirect", "env")
    assert settings.user_agents == ("agent-a", "agent-b")
    assert settings.degraded_backoff_s == 0.0


def test_constructor_arguments_beat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RED_JWT_TOKEN", "from-env")
    monkeypatch.setenv("RED_TOKEN_TTL_S", "60")

    settings = Settings(provisioned_token="explicit", token_ttl_s=90.0, mode=DEPLOYMENT)

    assert settings.provisioned_token == "explicit"
    assert settings.token_ttl_s == 90.0


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError, match="deployment mode"):
        Settings(mode="batch")


def test_unknown_strategy_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RED_TOKEN_STRATEGY_ORDER", "env,carrier-pigeon")
    with pytest.raises(ValueError, match="carrier-pigeon"):
        Settings()
