import os
from typing import Mapping, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from gitgrade.errors import ConfigurationError

DEFAULT_MODEL = "gemini-flash-latest"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


class Settings(BaseModel):
    """
    Process-wide settings. Built once at start-up and handed to the analyst.
    """
    model_config = ConfigDict(frozen=True)

    github_token: str = Field(..., min_length=1, repr=False)
    ai_api_key: str = Field(..., min_length=1, repr=False)
    model: str = DEFAULT_MODEL
    github_api_url: str = DEFAULT_GITHUB_API_URL
    http_timeout: float = Field(default=15.0, gt=0, description="Per-call timeout for GitHub requests (seconds)")
    model_timeout: float = Field(default=60.0, gt=0, description="Timeout for a single model completion (seconds)")
    request_timeout: float = Field(default=120.0, gt=0, description="Deadline for a whole analysis request (seconds)")
    commit_limit: int = Field(default=100, ge=1, description="How many recent commits to fetch")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """
        Reads settings from the environment (and a local .env file when `environ` is not given).
        Raises ConfigurationError naming every missing credential.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        github_token = environ.get("GITHUB_TOKEN")
        ai_api_key = environ.get("AI_API_KEY") or environ.get("GEMINI_API_KEY")

        missing = []
        if not github_token:
            missing.append("GITHUB_TOKEN")
        if not ai_api_key:
            missing.append("AI_API_KEY")
        if missing:
            raise ConfigurationError(f"Required environment variables are not set: {', '.join(missing)}")

        values = {
            "github_token": github_token,
            "ai_api_key": ai_api_key,
            "model": environ.get("GITGRADE_MODEL") or DEFAULT_MODEL,
            "github_api_url": (environ.get("GITGRADE_GITHUB_API_URL") or DEFAULT_GITHUB_API_URL).rstrip("/"),
            "http_timeout": _number(environ, "GITGRADE_HTTP_TIMEOUT", 15.0),
            "model_timeout": _number(environ, "GITGRADE_MODEL_TIMEOUT", 60.0),
            "request_timeout": _number(environ, "GITGRADE_REQUEST_TIMEOUT", 120.0),
            "commit_limit": int(_number(environ, "GITGRADE_COMMIT_LIMIT", 100)),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        if values["commit_limit"] < 1:
            raise ConfigurationError("GITGRADE_COMMIT_LIMIT must be at least 1")
        for key in ("http_timeout", "model_timeout", "request_timeout"):
            if values[key] <= 0:
                raise ConfigurationError(f"{key} must be positive")

        return cls(**values)


def _number(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}")
