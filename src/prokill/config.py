"""Runtime settings for prokill, read from PROKILL_* environment variables."""

import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from prokill.errors import ConfigError

ENV_PREFIX = "PROKILL_"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def default_log_file() -> Path:
    """Default log location under the user cache directory."""
    cache_home = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(cache_home) / "prokill" / "prokill.log"


class Settings(BaseSettings):
    """
    Immutable application settings.

    Each field is read from the matching ``PROKILL_*`` variable, e.g.
    ``PROKILL_LOG_LEVEL``; booleans accept 1/0, true/false, yes/no, on/off.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    log_level: str = "WARNING"
    log_file: Path | None = None
    log_json: bool = False
    force_kill: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def _valid_log_level(cls, v: Any) -> str:
        upper = str(v).strip().upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"must be one of {sorted(_VALID_LOG_LEVELS)}, got {v!r}")
        return upper

    @field_validator("log_file", mode="before")
    @classmethod
    def _expand_log_file(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            return Path(v).expanduser()
        return v

    @property
    def resolved_log_file(self) -> Path:
        """The log file to write, falling back to the default location."""
        return self.log_file if self.log_file is not None else default_log_file()

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.

        Raises:
            ConfigError: Listing every invalid variable, so they can all be
                fixed at once.
        """
        try:
            return cls()
        except ValidationError as exc:
            problems = [
                f"{ENV_PREFIX}{'.'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
                for err in exc.errors()
            ]
            raise ConfigError("Invalid configuration:\n  - " + "\n  - ".join(problems)) from exc
