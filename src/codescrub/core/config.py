"""
Configuration module for codescrub.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from codescrub.core.errors import ConfigError
from codescrub.core.models import OutputLayout

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


@dataclass(frozen=True)
class FilterConfig:
    """Which files take part in a conversion."""

    include_migrations: bool = field(
        default_factory=lambda: _get_default("filters", "include_migrations", True)
    )
    migrations_folder: str = field(
        default_factory=lambda: _get_default("filters", "migrations_folder", "Migrations")
    )
    include_interfaces: bool = field(
        default_factory=lambda: _get_default("filters", "include_interfaces", True)
    )
    include_tests: bool = field(
        default_factory=lambda: _get_default("filters", "include_tests", True)
    )
    include_generated: bool = field(
        default_factory=lambda: _get_default("filters", "include_generated", True)
    )
    respect_gitignore: bool = field(
        default_factory=lambda: _get_default("filters", "respect_gitignore", False)
    )


@dataclass(frozen=True)
class ScrubConfig:
    """Content transforms applied after comment stripping."""

    strip_docs: bool = field(default_factory=lambda: _get_default("scrub", "strip_docs", False))
    strip_regions: bool = field(
        default_factory=lambda: _get_default("scrub", "strip_regions", True)
    )
    strip_empty_lines: bool = field(
        default_factory=lambda: _get_default("scrub", "strip_empty_lines", False)
    )
    optimize_whitespace: bool = field(
        default_factory=lambda: _get_default("scrub", "optimize_whitespace", False)
    )


@dataclass(frozen=True)
class OutputConfig:
    """Where and how converted files are written."""

    layout: OutputLayout = field(
        default_factory=lambda: _get_default("output", "layout", OutputLayout.STRUCTURED)
    )
    destination: str = field(default_factory=lambda: _get_default("output", "destination", ""))
    extension: str = field(default_factory=lambda: _get_default("output", "extension", ".txt"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "layout", OutputLayout.parse(self.layout))
        object.__setattr__(self, "destination", str(self.destination or ""))
        extension = str(self.extension or "").strip()
        if not extension or extension == ".":
            raise ConfigError("Output extension must not be empty")
        if not extension.startswith("."):
            extension = f".{extension}"
        object.__setattr__(self, "extension", extension)


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass(frozen=True)
class ConverterConfig:
    """Main configuration class for codescrub."""

    filters: FilterConfig = field(default_factory=FilterConfig)
    scrub: ScrubConfig = field(default_factory=ScrubConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "ConverterConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            ConverterConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ConfigError: If the file format or content is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif path.suffix == ".json":
                data = json.loads(content) if content.strip() else {}
            else:
                raise ConfigError(f"Unsupported config file format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Invalid configuration format: expected mapping, got {type(data).__name__}"
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "ConverterConfig":
        """Create ConverterConfig from a dictionary."""
        sections = {
            "filters": FilterConfig,
            "scrub": ScrubConfig,
            "output": OutputConfig,
            "logging": LoggingConfig,
        }
        unknown = set(data) - set(sections)
        if unknown:
            raise ConfigError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}")

        values = {}
        for name, section_cls in sections.items():
            if name not in data:
                continue
            section_data = data[name] or {}
            if not isinstance(section_data, dict):
                raise ConfigError(
                    f"Invalid '{name}' section: expected mapping, got {type(section_data).__name__}"
                )
            # Quoted booleans ("false") would otherwise be truthy strings
            bool_keys = {f.name for f in fields(section_cls) if f.type is bool}
            section_data = {
                key: _parse_bool(value) if key in bool_keys and isinstance(value, str) else value
                for key, value in section_data.items()
            }
            try:
                values[name] = section_cls(**section_data)
            except TypeError as e:
                raise ConfigError(f"Invalid '{name}' section: {e}") from e

        return cls(**values)

    def apply_env_overrides(self) -> "ConverterConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: CODESCRUB_<SECTION>_<KEY>
        Examples:
            - CODESCRUB_FILTERS_INCLUDE_TESTS
            - CODESCRUB_SCRUB_STRIP_DOCS
            - CODESCRUB_OUTPUT_LAYOUT
            - CODESCRUB_LOGGING_LEVEL

        Returns:
            A new ConverterConfig with environment overrides applied
        """
        env_mappings = {
            # Filter config
            "CODESCRUB_FILTERS_INCLUDE_MIGRATIONS": ("filters", "include_migrations", _parse_bool),
            "CODESCRUB_FILTERS_MIGRATIONS_FOLDER": ("filters", "migrations_folder", str),
            "CODESCRUB_FILTERS_INCLUDE_INTERFACES": ("filters", "include_interfaces", _parse_bool),
            "CODESCRUB_FILTERS_INCLUDE_TESTS": ("filters", "include_tests", _parse_bool),
            "CODESCRUB_FILTERS_INCLUDE_GENERATED": ("filters", "include_generated", _parse_bool),
            "CODESCRUB_FILTERS_RESPECT_GITIGNORE": ("filters", "respect_gitignore", _parse_bool),
            # Scrub config
            "CODESCRUB_SCRUB_STRIP_DOCS": ("scrub", "strip_docs", _parse_bool),
            "CODESCRUB_SCRUB_STRIP_REGIONS": ("scrub", "strip_regions", _parse_bool),
            "CODESCRUB_SCRUB_STRIP_EMPTY_LINES": ("scrub", "strip_empty_lines", _parse_bool),
            "CODESCRUB_SCRUB_OPTIMIZE_WHITESPACE": ("scrub", "optimize_whitespace", _parse_bool),
            # Output config
            "CODESCRUB_OUTPUT_LAYOUT": ("output", "layout", OutputLayout.parse),
            "CODESCRUB_OUTPUT_DESTINATION": ("output", "destination", str),
            "CODESCRUB_OUTPUT_EXTENSION": ("output", "extension", str),
            # Logging config
            "CODESCRUB_LOGGING_LEVEL": ("logging", "level", str),
        }

        overrides: dict[str, dict[str, Any]] = {}
        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                overrides.setdefault(section, {})[key] = converter(value)

        config = self
        for section, changes in overrides.items():
            config = replace(config, **{section: replace(getattr(config, section), **changes)})
        return config

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        data = asdict(self)
        data["output"]["layout"] = self.output.layout.value
        return data

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ConfigError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ConfigError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.strip().lower() in ("true", "1", "yes", "on", "y")


def section_keys(section: str) -> list[str]:
    """List the field names of a configuration section."""
    section_cls = {
        "filters": FilterConfig,
        "scrub": ScrubConfig,
        "output": OutputConfig,
        "logging": LoggingConfig,
    }[section]
    return [f.name for f in fields(section_cls)]


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> ConverterConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        ConverterConfig instance
    """
    if config_path:
        config = ConverterConfig.from_file(config_path)
    else:
        config = ConverterConfig()

    if apply_env:
        config = config.apply_env_overrides()

    return config
