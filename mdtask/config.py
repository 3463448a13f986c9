"""Configuration loading for mdtask.

Configuration lives in a TOML file (``.mdtask.toml`` by default) and is
validated into pydantic models. Every key is optional; a missing file means
defaults.
"""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mdtask.constants import ALT_CONFIG_FILENAME, CONFIG_FILENAME, DEFAULT_SEARCH_PATH
from mdtask.enums import TaskStatus
from mdtask.errors import InternalError, InvalidInputError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDTASK_CONFIG"
PATHS_ENV_VAR = "MDTASK_PATHS"


class TaskConfig(BaseModel):
    """Defaults applied when a task is created."""

    title_prefix: str = ""
    default_status: str = TaskStatus.TODO.value
    content_template: str = ""
    description_template: str = ""
    default_tags: list[str] = Field(default_factory=list)

    @field_validator("default_status")
    @classmethod
    def validate_default_status(cls, v: str) -> str:
        if not v:
            return v
        status = TaskStatus.parse(v)
        if status is None:
            choices = ", ".join(s.value for s in TaskStatus)
            raise ValueError(f"unknown status {v!r}, expected one of {choices}")
        return status.value


class MCPConfig(BaseModel):
    """MCP server settings."""

    enabled: bool = True
    allowed_paths: list[str] = Field(default_factory=list)


class Config(BaseModel):
    """Top-level configuration. Unknown tables (``web``, ``editor``) are ignored."""

    model_config = ConfigDict(extra="ignore")

    paths: list[str] = Field(default_factory=lambda: [DEFAULT_SEARCH_PATH])
    task: TaskConfig = Field(default_factory=TaskConfig)
    mcp: MCPConfig = Field(default_factory=MCPConfig)

    def search_paths(self) -> list[str]:
        """Task roots followed by the extra MCP roots, without duplicates."""
        seen: list[str] = []
        for path in [*self.paths, *self.mcp.allowed_paths]:
            if path not in seen:
                seen.append(path)
        return seen


def load_config(path: str | Path) -> Config:
    """
    Load configuration from a TOML file.

    Args:
        path: Config file location; a missing file yields the defaults

    Returns:
        Validated configuration

    Raises:
        InternalError: If the file exists but cannot be read
        InvalidInputError: If the file is not valid TOML or has bad values
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return Config()
    except OSError as e:
        raise InternalError(f"failed to read config file {path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise InvalidInputError("config file", str(path), str(e)) from e

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError("config file", str(path), str(e)) from e

    logger.debug("Loaded config from %s", path)
    return config


def find_config_file(cwd: Path | None = None, home: Path | None = None) -> Path | None:
    """
    Locate the config file.

    Looks for ``.mdtask.toml`` and ``mdtask.toml`` in the working directory,
    then ``~/.config/mdtask/config.toml`` and ``~/.mdtask.toml``.
    """
    cwd = cwd or Path.cwd()
    candidates = [cwd / CONFIG_FILENAME, cwd / ALT_CONFIG_FILENAME]

    if home is None:
        try:
            home = Path.home()
        except RuntimeError:
            home = None
    if home is not None:
        candidates.extend([home / ".config" / "mdtask" / "config.toml", home / CONFIG_FILENAME])

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_from_default_location() -> Config:
    """
    Load configuration the way the MCP server does.

    ``MDTASK_CONFIG`` names an explicit file; otherwise :func:`find_config_file`
    decides. ``MDTASK_PATHS`` (``os.pathsep``-separated) overrides ``paths``.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    config_file = Path(explicit) if explicit else find_config_file()
    config = load_config(config_file) if config_file else Config()

    env_paths = os.environ.get(PATHS_ENV_VAR)
    if env_paths:
        config.paths = [p for p in env_paths.split(os.pathsep) if p]
    return config
