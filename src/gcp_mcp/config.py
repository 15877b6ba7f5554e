"""Configuration management for the Google Cloud MCP server."""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from gcp_mcp.errors import ConfigError

_config_logger = logging.getLogger(__name__)

PUBLICCA_ENDPOINT = "https://publicca.googleapis.com"


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class GoogleSettings(BaseModel):
    project: str | None = Field(default=None)
    credentials: str | None = Field(
        default=None,
        description="Path to, or contents of, a service account key file in JSON format",
    )


class BackoffSettings(BaseModel):
    """Exponential backoff schedule for transient transport failures.

    Defaults follow the usual exponential backoff schedule: 0.5s initial
    interval growing by 1.5x, capped at 60s per interval and 15 minutes
    overall. Each sleep is drawn from ``interval * (1 +/- randomization_factor)``;
    a factor of 0 gives a deterministic schedule.
    """

    initial_interval_seconds: float = Field(default=0.5, gt=0, le=60)
    multiplier: float = Field(default=1.5, ge=1.0, le=10.0)
    randomization_factor: float = Field(default=0.5, ge=0.0, lt=1.0)
    max_interval_seconds: float = Field(default=60.0, gt=0, le=3600)
    max_elapsed_seconds: float = Field(default=900.0, gt=0, le=3600)
    max_attempts: int | None = Field(default=None, ge=1, le=100)

    @model_validator(mode="after")
    def _check_intervals(self) -> "BackoffSettings":
        if self.initial_interval_seconds > self.max_interval_seconds:
            raise ValueError("initial_interval_seconds must not exceed max_interval_seconds")
        return self


class EabSettings(BaseModel):
    endpoint: str = Field(default=PUBLICCA_ENDPOINT)
    request_timeout_seconds: float = Field(default=30.0, ge=0.1, le=600)
    backoff: BackoffSettings = Field(default_factory=BackoffSettings)

    @field_validator("endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str) -> str:
        endpoint = value.strip().rstrip("/")
        if not endpoint.startswith(("https://", "http://")):
            raise ValueError("endpoint must use http or https")
        return endpoint


class ServerSettings(BaseModel):
    instructions: str = Field(
        default=(
            "Use these tools to request or rotate the ACME External Account Binding "
            "credential for Google Public CA, and to look up load balancer backend "
            "services by name or by the tags stored in their descriptions."
        )
    )


class Settings(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    eab: EabSettings = Field(default_factory=EabSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "project": "GOOGLE_PROJECT",
    "credentials": "GOOGLE_CREDENTIALS",
    "application_credentials": "GOOGLE_APPLICATION_CREDENTIALS",
    "endpoint": "PUBLICCA_ENDPOINT",
    "instructions": "MCP_INSTRUCTIONS",
}


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return None
    return value


def _env_int(key: str, default: int | None) -> int | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %s", key, value, default
        )
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    backoff_defaults = BackoffSettings()

    settings_data: dict[str, object] = {
        "server": {
            "instructions": os.getenv(ENV_KEYS["instructions"], ServerSettings().instructions),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _env_str(ENV_KEYS["log_file"]),
        },
        "google": {
            "project": _env_str(ENV_KEYS["project"]),
            "credentials": (
                _env_str(ENV_KEYS["credentials"])
                or _env_str(ENV_KEYS["application_credentials"])
            ),
        },
        "eab": {
            "endpoint": os.getenv(ENV_KEYS["endpoint"], PUBLICCA_ENDPOINT),
            "request_timeout_seconds": _env_float(
                "EAB_REQUEST_TIMEOUT_SECONDS",
                EabSettings().request_timeout_seconds,
            ),
            "backoff": {
                "initial_interval_seconds": _env_float(
                    "EAB_BACKOFF_INITIAL_INTERVAL_SECONDS",
                    backoff_defaults.initial_interval_seconds,
                ),
                "multiplier": _env_float(
                    "EAB_BACKOFF_MULTIPLIER",
                    backoff_defaults.multiplier,
                ),
                "randomization_factor": _env_float(
                    "EAB_BACKOFF_RANDOMIZATION_FACTOR",
                    backoff_defaults.randomization_factor,
                ),
                "max_interval_seconds": _env_float(
                    "EAB_BACKOFF_MAX_INTERVAL_SECONDS",
                    backoff_defaults.max_interval_seconds,
                ),
                "max_elapsed_seconds": _env_float(
                    "EAB_BACKOFF_MAX_ELAPSED_SECONDS",
                    backoff_defaults.max_elapsed_seconds,
                ),
                "max_attempts": _env_int(
                    "EAB_BACKOFF_MAX_ATTEMPTS",
                    backoff_defaults.max_attempts,
                ),
            },
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc


def resolve_credentials_json(value: str) -> str:
    """Return service account JSON from either a file path or inline contents.

    A value naming an existing file (after ``~`` expansion) is read from disk;
    anything else is taken as the JSON document itself.
    """
    candidate = value.strip()
    if not candidate.startswith("{"):
        path = Path(candidate).expanduser()
        try:
            if path.is_file():
                return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to read credentials file {path}: {exc}") from exc
    return candidate


def _project_from_credentials(credentials_json: str) -> str | None:
    try:
        data = json.loads(credentials_json)
    except json.JSONDecodeError:
        return None
    if isinstance(data, dict):
        project = data.get("project_id")
        if isinstance(project, str) and project:
            return project
    return None


def resolve_service_account_json(settings: Settings, credentials: str | None = None) -> str:
    raw_credentials = credentials or settings.google.credentials
    if not raw_credentials:
        raise ConfigError(
            "Missing Google Cloud credentials. Set GOOGLE_CREDENTIALS or "
            "GOOGLE_APPLICATION_CREDENTIALS to a service account key file "
            "path or its JSON contents."
        )
    return resolve_credentials_json(raw_credentials)


def resolve_google_target(
    settings: Settings,
    project: str | None = None,
    credentials: str | None = None,
) -> tuple[str, str]:
    """Resolve ``(project, credentials_json)`` with per-call overrides.

    Overrides win when non-empty; otherwise the configured values apply and,
    as a last resort, the project is read from the service account itself.
    """
    credentials_json = resolve_service_account_json(settings, credentials)
    resolved_project = (
        project
        or settings.google.project
        or _project_from_credentials(credentials_json)
    )
    if not resolved_project:
        raise ConfigError(
            "Missing Google Cloud project. Set GOOGLE_PROJECT or use a service "
            "account key that carries project_id."
        )
    return resolved_project, credentials_json
