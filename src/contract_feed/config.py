"""Runtime settings loaded from environment variables or a YAML file."""

import os
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field

from contract_feed.errors import ConfigurationError

ENV_DATABASE = "CONTRACT_FEED_DB"
ENV_SAM_API_KEY = "SAM_API_KEY"
ENV_SOCRATA_TOKEN = "SOCRATA_APP_TOKEN"
ENV_LOG_LEVEL = "CONTRACT_FEED_LOG_LEVEL"


class Settings(BaseModel):
    """Connection strings, credentials and fetch policy knobs."""

    database_path: Optional[Path] = Field(default=None, description="SQLite document store path")
    sam_api_key: Optional[str] = Field(default=None, description="SAM.gov public API key")
    socrata_app_token: Optional[str] = Field(default=None, description="Optional Socrata X-App-Token")

    request_timeout: float = Field(default=30.0, gt=0)
    federal_lookback_days: int = Field(default=30, ge=1)
    ny_lookback_days: int = Field(default=90, ge=1)

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from process environment only."""
        data: dict = {}
        if os.environ.get(ENV_DATABASE):
            data["database_path"] = os.environ[ENV_DATABASE]
        if os.environ.get(ENV_SAM_API_KEY):
            data["sam_api_key"] = os.environ[ENV_SAM_API_KEY]
        if os.environ.get(ENV_SOCRATA_TOKEN):
            data["socrata_app_token"] = os.environ[ENV_SOCRATA_TOKEN]
        if os.environ.get(ENV_LOG_LEVEL):
            data["log_level"] = os.environ[ENV_LOG_LEVEL]
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """
        Load settings from YAML. Supports nested (database/sources/fetch) or flat keys.
        Values missing from the file fall back to the environment.
        """
        data = yaml.safe_load(Path(path).read_text()) or {}
        env = cls.from_env()
        database = data.get("database", {}) or {}
        sources = data.get("sources", {}) or {}
        fetch = data.get("fetch", {}) or {}

        def _get(key: str, nested: dict, default=None):
            return nested.get(key, data.get(key, default))

        flat: dict = {
            "database_path": _get("path", database) or _get("database_path", database) or env.database_path,
            "sam_api_key": _get("sam_api_key", sources) or env.sam_api_key,
            "socrata_app_token": _get("socrata_app_token", sources) or env.socrata_app_token,
            "log_level": data.get("log_level") or env.log_level,
        }
        for key in ("request_timeout", "federal_lookback_days", "ny_lookback_days"):
            value = _get(key, fetch)
            if value is not None:
                flat[key] = value
        return cls.model_validate(flat)

    def require_database(self) -> Path:
        """Return the store path or fail fast when it is not configured."""
        if not self.database_path:
            raise ConfigurationError(
                f"No database configured. Set {ENV_DATABASE} or pass --db."
            )
        return self.database_path

    def require_sam_api_key(self) -> str:
        """Return the SAM.gov key or fail fast when it is not configured."""
        if not self.sam_api_key or not self.sam_api_key.strip():
            raise ConfigurationError(
                f"SAM.gov API key missing. Set {ENV_SAM_API_KEY} or sources.sam_api_key in the config file."
            )
        return self.sam_api_key.strip()
