"""Configuration loading for paranoid-space.

This module resolves an "effective config" by layering config sources.

Layer order (later wins):
1) System defaults (hardcoded in the models below)
2) pyproject.toml [tool.paranoid-space] in the start directory
3) .paranoid-space.toml in the start directory
4) Explicit config file passed by the caller (--config)
5) Environment overrides (PARANOID_SPACE_MAX_DEPTH)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

# Conditional TOML import: stdlib tomllib (3.11+) or fallback tomli (<3.11)
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

PYPROJECT_FILE = "pyproject.toml"
PYPROJECT_TABLE = "paranoid-space"
PROJECT_CONFIG_FILE = ".paranoid-space.toml"
ENV_MAX_DEPTH = "PARANOID_SPACE_MAX_DEPTH"

DEFAULT_MAX_DEPTH = 256

# Attributes whose values are read by humans rather than by programs.
DEFAULT_PROSE_ATTRIBUTES = (
    "title",
    "alt",
    "placeholder",
    "value",
    "label",
    "aria-label",
    "aria-description",
    "aria-placeholder",
    "summary",
    "content",
)


class HtmlConfig(BaseModel):
    """HTML walker options."""

    prose_attributes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PROSE_ATTRIBUTES),
        description="Attribute names whose quoted values are spaced",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("prose_attributes")
    @classmethod
    def _lowercase(cls, value: List[str]) -> List[str]:
        return [name.strip().lower() for name in value if name.strip()]


class JsonConfig(BaseModel):
    """JSON walker options."""

    space_keys: bool = Field(True, description="Space object keys as well as values")

    model_config = ConfigDict(extra="forbid")


class Json5Config(BaseModel):
    """JSON5 walker options."""

    space_keys: bool = Field(False, description="Space quoted object keys")

    model_config = ConfigDict(extra="forbid")


class SpacingConfig(BaseModel):
    """Effective configuration shared by the dispatcher and all walkers."""

    html: HtmlConfig = Field(default_factory=HtmlConfig)
    json_format: JsonConfig = Field(default_factory=JsonConfig, alias="json")
    json5: Json5Config = Field(default_factory=Json5Config)
    extensions: Dict[str, str] = Field(
        default_factory=dict, description="Extra file extension -> format mappings"
    )
    max_depth: int = Field(DEFAULT_MAX_DEPTH, gt=0, description="Structural nesting limit")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: Dict[str, str]) -> Dict[str, str]:
        normalized: Dict[str, str] = {}
        for ext, fmt in value.items():
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("extension must be non-empty")
            if not ext.startswith("."):
                ext = "." + ext
            normalized[ext] = fmt.strip().lower()
        return normalized


class ConfigLoader:
    """Load and resolve paranoid-space configuration."""

    @staticmethod
    def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = dict(base)
        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @staticmethod
    def _read_toml_optional(path: Path) -> dict[str, Any]:
        """Read TOML config file; return {} if not found."""
        if not path.exists():
            return {}
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load TOML from {path}: {e}")
        return data

    @staticmethod
    def load_pyproject_table(start_path: Path) -> dict[str, Any]:
        data = ConfigLoader._read_toml_optional(start_path / PYPROJECT_FILE)
        table = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigError(f"[tool.{PYPROJECT_TABLE}] must be a table")
        return table

    @staticmethod
    def load_env_overrides() -> dict[str, Any]:
        raw = os.environ.get(ENV_MAX_DEPTH)
        if raw is None or not raw.strip():
            return {}
        try:
            return {"max_depth": int(raw)}
        except ValueError:
            raise ConfigError(f"{ENV_MAX_DEPTH} must be an integer, got {raw!r}")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> SpacingConfig:
        try:
            return SpacingConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")

    @staticmethod
    def load_effective_config(
        start_path: Optional[Path] = None,
        config_file: Optional[Path] = None,
    ) -> SpacingConfig:
        """Resolve the layered configuration for a working directory.

        Args:
            start_path: Directory holding pyproject.toml / .paranoid-space.toml
                (defaults to the current directory)
            config_file: Explicit TOML file; must exist when given

        Returns:
            Validated SpacingConfig

        Raises:
            ConfigError: If a file cannot be read or values are invalid
        """
        start = (start_path or Path.cwd()).resolve()
        effective: dict[str, Any] = {}

        layers = [
            ("pyproject", ConfigLoader.load_pyproject_table(start)),
            ("project", ConfigLoader._read_toml_optional(start / PROJECT_CONFIG_FILE)),
        ]
        if config_file is not None:
            if not config_file.exists():
                raise ConfigError(f"Config file not found: {config_file}")
            layers.append(("explicit", ConfigLoader._read_toml_optional(config_file)))
        layers.append(("env", ConfigLoader.load_env_overrides()))

        for name, layer in layers:
            if layer:
                logger.debug(f"Applying config layer '{name}': {sorted(layer)}")
                effective = ConfigLoader._deep_merge(effective, layer)

        return ConfigLoader.from_dict(effective)


def default_config() -> SpacingConfig:
    """Return the built-in defaults without reading any file."""
    return SpacingConfig()
