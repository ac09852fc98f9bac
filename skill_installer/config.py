"""Configuration management for the skill installer."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_ENV_VAR = "SKILL_INSTALLER_CONFIG"


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

        def replacer(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replacer, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


class DestinationsConfig(BaseModel):
    """Skill roots that receive every install."""
    model_config = ConfigDict(validate_default=True)

    claude_root: Path = Path("~/.claude/skills")
    codex_root: Path = Path("~/.codex/skills")

    @field_validator("claude_root", "codex_root", mode="after")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def roots(self) -> list[Path]:
        return [self.claude_root, self.codex_root]


class GitHubConfig(BaseModel):
    """GitHub API access."""
    token: str = Field(default_factory=lambda: os.environ.get("GITHUB_TOKEN", ""))
    api_host: str = "api.github.com"
    user_agent: str = "Claude-Skill-Installer"

    @property
    def api_base(self) -> str:
        return f"https://{self.api_host}"


class HTTPConfig(BaseModel):
    """HTTP client behavior."""
    max_redirects: int = 10
    timeout_seconds: float | None = None  # None waits indefinitely


class DownloadConfig(BaseModel):
    """Directory download settings."""
    max_concurrency: int = Field(default=8, ge=1)
    staging_prefix: str = "skill-install-"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "WARNING"
    format: str = "text"


class InstallerConfig(BaseSettings):
    """Main installer configuration."""
    model_config = SettingsConfigDict(env_prefix="SKILL_INSTALLER_", env_nested_delimiter="__")

    destinations: DestinationsConfig = Field(default_factory=DestinationsConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def default_config_path() -> Path | None:
    """Config path from the environment, if any."""
    value = os.environ.get(CONFIG_ENV_VAR)
    return Path(value).expanduser() if value else None


def load_config(config_path: str | Path | None = None) -> InstallerConfig:
    """Load configuration from YAML file with environment variable substitution.

    Args:
        config_path: Path to the YAML configuration file. Falls back to
            $SKILL_INSTALLER_CONFIG, then to built-in defaults.

    Returns:
        Loaded and validated InstallerConfig object.
    """
    if config_path is None:
        config_path = default_config_path()
        if config_path is None:
            return InstallerConfig()

    config_path = Path(config_path).expanduser()

    if not config_path.exists():
        # Return default config if file doesn't exist
        return InstallerConfig()

    with open(config_path) as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return InstallerConfig()

    # Substitute environment variables
    config_data = _substitute_env_vars(raw_config)

    return InstallerConfig(**config_data)
