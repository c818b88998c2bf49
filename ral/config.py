"""Configuration management for ral.toml."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomli_w

from ral.constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DATA_DIR_ENV_VAR,
    DEFAULT_DATA_DIRS,
    DEFAULT_LOG_LEVEL,
)
from ral.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class RalConfig:
    """Configuration from ral.toml.

    Example:
        [ral]
        data_dirs = ["/usr/share/ral/data", "./data"]
        log_level = "warning"
        timeout = 30
        disabled = ["user::legacy"]
    """

    path: Path | None = None
    data_dirs: list[Path] = field(default_factory=lambda: [Path(d) for d in DEFAULT_DATA_DIRS])
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: float | None = None  # seconds per script run; None waits forever
    disabled: list[str] = field(default_factory=list)  # qualified provider names

    @classmethod
    def default(cls) -> "RalConfig":
        return cls()

    @classmethod
    def load(cls, path: Path) -> "RalConfig":
        """Load configuration from ral.toml.

        Args:
            path: Path to the ral.toml file

        Returns:
            Parsed RalConfig

        Raises:
            ConfigNotFoundError: If the file doesn't exist
            ConfigParseError: If the file cannot be parsed
            ConfigValidationError: If the configuration is invalid
        """
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

        return cls._from_dict(path, data)

    @classmethod
    def _from_dict(cls, path: Path, data: dict[str, Any]) -> "RalConfig":
        """Create a RalConfig from a parsed TOML dict."""
        config = cls(path=path)
        section = data.get("ral", {})
        if not isinstance(section, dict):
            raise ConfigValidationError(
                f"[ral] must be a table, got {type(section).__name__}"
            )

        if "data_dirs" in section:
            dirs = section["data_dirs"]
            if not isinstance(dirs, list) or not all(isinstance(d, str) for d in dirs):
                raise ConfigValidationError("'data_dirs' must be a list of strings")
            # Relative data dirs are relative to the config file
            config.data_dirs = [(path.parent / d) if not Path(d).is_absolute() else Path(d)
                                for d in dirs]

        if "log_level" in section:
            level = section["log_level"]
            if not isinstance(level, str) or level.lower() not in LOG_LEVELS:
                raise ConfigValidationError(
                    f"Invalid log_level '{level}'. Must be one of: {', '.join(LOG_LEVELS)}"
                )
            config.log_level = level.lower()

        if "timeout" in section:
            timeout = section["timeout"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigValidationError("'timeout' must be a positive number of seconds")
            config.timeout = float(timeout)

        if "disabled" in section:
            disabled = section["disabled"]
            if not isinstance(disabled, list) or not all(isinstance(d, str) for d in disabled):
                raise ConfigValidationError("'disabled' must be a list of provider names")
            config.disabled = list(disabled)

        return config

    def save(self, path: Path | None = None) -> None:
        """Save configuration to ral.toml."""
        target = path or self.path
        if target is None:
            raise ConfigValidationError("No path to save the configuration to")
        with open(target, "wb") as f:
            tomli_w.dump(self._to_dict(), f)
        self.path = target

    def _to_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dict."""
        section: dict[str, Any] = {
            "data_dirs": [str(d) for d in self.data_dirs],
            "log_level": self.log_level,
        }
        if self.timeout is not None:
            section["timeout"] = self.timeout
        if self.disabled:
            section["disabled"] = self.disabled
        return {"ral": section}


def find_config(start: Path | None = None) -> Path | None:
    """Find ral.toml by walking up from ``start`` (the cwd by default)."""
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def resolve_config(explicit: Path | None = None) -> RalConfig:
    """Work out the configuration to use.

    Order: the explicit path, ``$RAL_CONFIG``, a ral.toml found from the
    current directory upwards, then defaults. ``$RAL_DATA_DIR`` (a path
    list) replaces the configured data dirs.

    Raises:
        ConfigNotFoundError: If an explicitly named file doesn't exist
        ConfigParseError: If the file cannot be parsed
        ConfigValidationError: If the configuration is invalid
    """
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if explicit is not None:
        config = RalConfig.load(explicit)
    elif env_path:
        config = RalConfig.load(Path(env_path).expanduser())
    else:
        found = find_config()
        config = RalConfig.load(found) if found else RalConfig.default()

    env_dirs = os.environ.get(DATA_DIR_ENV_VAR, "").strip()
    if env_dirs:
        config.data_dirs = [Path(d).expanduser() for d in env_dirs.split(os.pathsep) if d]
    return config
