import pytest
from pydantic import ValidationError
from gitgrade.config import DEFAULT_MODEL, Settings
from gitgrade.errors import ConfigurationError

BASE_ENV = {"GITHUB_TOKEN": "gh", "AI_API_KEY": "ai"}


def test_defaults():
    settings = Settings.from_env(BASE_ENV)
    assert settings.model == DEFAULT_MODEL
    assert settings.github_api_url == "https://api.github.com"
    assert settings.commit_limit == 100
    assert settings.http_timeout == 15.0


@pytest.mark.parametrize("env, missing", [
    ({}, ["GITHUB_TOKEN", "AI_API_KEY"]),
    ({"GITHUB_TOKEN": "gh"}, ["AI_API_KEY"]),
    ({"AI_API_KEY": "ai", "GITHUB_TOKEN": ""}, ["GITHUB_TOKEN"]),
])
def test_missing_credentials(env, missing):
    with pytest.raises(ConfigurationError) as exc:
        Settings.from_env(env)
    for name in missing:
        assert name in exc.value.message
    assert exc.value.kind == "configuration"


def test_gemini_key_fallback():
    settings = Settings.from_env({"GITHUB_TOKEN": "gh", "GEMINI_API_KEY": "gem"})
    assert settings.ai_api_key == "gem"


def test_overrides_and_tuning():
    env = dict(BASE_ENV, GITGRADE_COMMIT_LIMIT="250", GITGRADE_HTTP_TIMEOUT="5",
               GITGRADE_GITHUB_API_URL="https://ghe.example.com/api/v3/")
    settings = Settings.from_env(env, model="gemini-2.5-pro")
    assert settings.model == "gemini-2.5-pro"
    assert settings.commit_limit == 250
    assert settings.http_timeout == 5.0
    assert settings.github_api_url == "https://ghe.example.com/api/v3"


@pytest.mark.parametrize("key, value", [
    ("GITGRADE_COMMIT_LIMIT", "0"),
    ("GITGRADE_HTTP_TIMEOUT", "soon"),
    ("GITGRADE_REQUEST_TIMEOUT", "-1"),
])
def test_invalid_tuning(key, value):
    with pytest.raises(ConfigurationError):
        Settings.from_env(dict(BASE_ENV, **{key: value}))


def test_credentials_hidden_from_repr():
    settings = Settings.from_env({"GITHUB_TOKEN": "secret-gh", "AI_API_KEY": "secret-ai"})
    assert "secret" not in repr(settings)


@pytest.mark.parametrize("token, key", [("", "ai"), ("gh", "")])
def test_direct_construction_rejects_empty_credentials(token, key):
    with pytest.raises(ValidationError):
        Settings(github_token=token, ai_api_key=key)
