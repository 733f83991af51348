# shellbridge/config.py
"""
Configuration management for shellbridge.
Uses TOML format for configuration files.
"""
import os
import sys
from pathlib import Path
from typing import Dict, Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from dotenv import load_dotenv

from shellbridge.constants import (
    CONFIG_FILE, DEFAULT_SHELL, DEFAULT_TIMEOUT,
    ENV_SHELL, ENV_TIMEOUT, ENV_MAX_RISK_LEVEL, ENV_DEBUG,
)
from shellbridge.safety.models import RiskLevel
from shellbridge.shell.dialects import ShellDialect
from shellbridge.utils.logging import get_logger

logger = get_logger(__name__)

# Fields that describe the running process rather than user preferences
_RUNTIME_ONLY_FIELDS = {"environment", "working_directory"}

# --- Configuration Models ---

class TerminalConfig(BaseModel):
    """Settings of one command orchestrator. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    shell_path: str = Field(
        default_factory=lambda: os.environ.get("SHELL", DEFAULT_SHELL),
        description="Shell executable used to run commands",
    )
    working_directory: Path = Field(default_factory=Path.cwd, description="Working directory for commands")
    environment: Dict[str, str] = Field(
        default_factory=lambda: dict(os.environ),
        description="Environment passed to commands",
    )
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Seconds before a command is terminated")
    adapt_commands: bool = Field(True, description="Rewrite commands for the target dialect")
    sanitize_commands: bool = Field(True, description="Classify and block risky commands")
    max_risk_level: RiskLevel = Field(RiskLevel.HIGH, description="Highest risk level allowed to run")
    capture_output: bool = Field(True, description="Capture stdout/stderr instead of inheriting them")
    target_dialect: Optional[ShellDialect] = Field(
        None, description="Dialect to adapt for; resolved from shell_path when unset"
    )
    history_limit: Optional[int] = Field(
        None, ge=1, description="Keep only the most recent results; unbounded when unset"
    )

    @field_validator("max_risk_level", mode="before")
    @classmethod
    def _parse_risk_level(cls, value: Any) -> RiskLevel:
        return RiskLevel.parse(value)

    @property
    def resolved_dialect(self) -> ShellDialect:
        """The dialect commands are adapted for."""
        return self.target_dialect or ShellDialect.from_shell_path(self.shell_path)

    def with_overrides(self, **changes: Any) -> "TerminalConfig":
        """Return a validated copy with the given (non-None) fields replaced."""
        data = self.model_dump()
        data.update({key: value for key, value in changes.items() if value is not None})
        return TerminalConfig.model_validate(data)

    def to_toml_dict(self) -> Dict[str, Any]:
        """Serializable preferences, without runtime-only or unset fields."""
        data = self.model_dump(mode="json", exclude=_RUNTIME_ONLY_FIELDS, exclude_none=True)
        data["max_risk_level"] = self.max_risk_level.label
        return data


class AppConfig(BaseModel):
    """Application configuration settings."""
    terminal: TerminalConfig = Field(default_factory=TerminalConfig, description="Orchestrator configuration")
    debug: bool = Field(False, description="Enable debug mode")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Configuration Manager ---

class ConfigManager:
    """Manages the configuration for shellbridge using TOML."""

    def __init__(self, config_file: Path = CONFIG_FILE):
        """Initializes the ConfigManager with default settings."""
        self.config_file = Path(config_file)
        self._config: AppConfig = AppConfig()
        self._logger = logger

    def _load_environment(self) -> Dict[str, Any]:
        """Loads overrides from environment variables and the .env file."""
        load_dotenv()  # Load .env file if present
        overrides: Dict[str, Any] = {}

        if os.getenv(ENV_SHELL):
            overrides["shell_path"] = os.environ[ENV_SHELL]
        if os.getenv(ENV_TIMEOUT):
            overrides["timeout"] = os.environ[ENV_TIMEOUT]
        if os.getenv(ENV_MAX_RISK_LEVEL):
            overrides["max_risk_level"] = os.environ[ENV_MAX_RISK_LEVEL]

        return overrides

    def _read_file(self) -> Dict[str, Any]:
        """Reads the TOML config file, returning an empty mapping on any problem."""
        if not self.config_file.exists():
            self._logger.debug(f"Configuration file not found at '{self.config_file}'. Using defaults.")
            return {}

        try:
            self._logger.debug(f"Loading configuration from: {self.config_file}")
            with open(self.config_file, "rb") as f:  # TOML requires binary read mode
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            self._logger.error(f"Error decoding TOML configuration file ({self.config_file}): {e}")
        except OSError as e:
            self._logger.error(f"I/O error accessing configuration file ({self.config_file}): {e}")

        self._logger.error("Using default configuration and environment variables.")
        return {}

    def load_config(self) -> None:
        """Loads configuration from the TOML config file and the environment."""
        config_data = self._read_file()

        terminal_data = config_data.get("terminal", {})
        if not isinstance(terminal_data, dict):
            self._logger.warning(f"Invalid [terminal] section in {self.config_file}. Ignoring.")
            terminal_data = {}
        terminal_data = {**terminal_data, **self._load_environment()}

        debug = config_data.get("debug", False)
        if not isinstance(debug, bool):
            self._logger.warning(
                f"Invalid type for 'debug' in {self.config_file}. Expected boolean, got {type(debug)}. Ignoring."
            )
            debug = False
        if os.getenv(ENV_DEBUG):
            debug = _parse_bool(os.environ[ENV_DEBUG])

        try:
            self._config = AppConfig(terminal=TerminalConfig(**terminal_data), debug=debug)
        except ValidationError as e:
            self._logger.error(f"Invalid terminal configuration: {e}")
            self._logger.error("Resetting configuration to default.")
            self._config = AppConfig(debug=debug)

    def save_config(self) -> Path:
        """Saves the current configuration to the config file (as TOML)."""
        config_dict = {
            "debug": self._config.debug,
            "terminal": self._config.terminal.to_toml_dict(),
        }

        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "wb") as f:
            tomli_w.dump(config_dict, f)

        self._logger.info(f"Configuration saved to {self.config_file}")
        return self.config_file

    @property
    def config(self) -> AppConfig:
        """Provides access to the current application configuration."""
        return self._config


# --- Global Instance ---

config_manager = ConfigManager()
config_manager.load_config()
