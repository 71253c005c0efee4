"""
Scanner registry mapping filename patterns to source kinds.
"""

import fnmatch
import logging
from pathlib import Path

import yaml

from codescrub.core.config import ScrubConfig
from codescrub.core.errors import ConfigError, UnsupportedFileType
from codescrub.core.scanners.base import LanguageScanner, SourceKind
from codescrub.core.scanners.c_family import CFamilyScanner
from codescrub.core.scanners.markup import CssScanner, HtmlScanner
from codescrub.core.scanners.python import PythonScanner
from codescrub.core.scanners.typescript import TypeScriptScanner

logger = logging.getLogger(__name__)

# Default path to the capability configuration file
_DEFAULT_LANGUAGES_CONFIG = Path(__file__).parent / "languages.yaml"

_SCANNERS: dict[SourceKind, LanguageScanner] = {
    SourceKind.C_FAMILY: CFamilyScanner(),
    SourceKind.TYPESCRIPT: TypeScriptScanner(),
    SourceKind.PYTHON: PythonScanner(),
    SourceKind.HTML: HtmlScanner(),
    SourceKind.CSS: CssScanner(),
}


def get_scanner(kind: SourceKind | str) -> LanguageScanner:
    """Get the scanner instance for a source kind."""
    return _SCANNERS[SourceKind(kind)]


class ScannerRegistry:
    """
    Ordered registry of source kinds and the filename patterns they handle.

    Selection walks the kinds in registration order and returns the first
    one with a matching pattern, so a composed suffix such as
    ``*.component.ts`` must be registered no later than a plain ``*.ts``
    of another kind to take effect.

    Example:
        >>> registry = ScannerRegistry()
        >>> registry.detect(Path("app.component.ts"))
        <SourceKind.TYPESCRIPT: 'typescript'>

        >>> # Load from custom config
        >>> registry = ScannerRegistry.from_yaml("custom_languages.yaml")
    """

    def __init__(self, load_defaults: bool = True):
        """
        Initialize the scanner registry.

        Args:
            load_defaults: If True, load default capabilities from languages.yaml.
        """
        self._patterns: dict[SourceKind, list[str]] = {}

        if load_defaults:
            self._load_from_yaml(_DEFAULT_LANGUAGES_CONFIG)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "ScannerRegistry":
        """
        Create a ScannerRegistry from a YAML configuration file.

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ConfigError: If the config file format is invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Languages config not found: {config_path}")
        registry = cls(load_defaults=False)
        registry._load_from_yaml(config_path)
        return registry

    def _load_from_yaml(self, config_path: Path) -> None:
        """
        Load capabilities from a YAML file.

        Expected format:
            source_kind:
              - "*.ext1"
              - "*.ext2"
        """
        if not config_path.exists():
            logger.warning(f"Languages config not found: {config_path}, using empty registry")
            return

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse languages config: {e}")
            raise ConfigError(f"Invalid YAML in languages config: {e}") from e

        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid languages config format: expected dict, got {type(data)}")

        for kind, patterns in data.items():
            if not isinstance(patterns, list):
                logger.warning(f"Invalid patterns for {kind}: expected list, got {type(patterns)}")
                continue
            self.register(kind, [str(p) for p in patterns])

    def register(self, kind: SourceKind | str, patterns: list[str]) -> "ScannerRegistry":
        """
        Register filename patterns for a source kind.

        New kinds are appended to the selection order; patterns for a kind
        that is already registered are added to it.

        Raises:
            ConfigError: If ``kind`` is not a known SourceKind

        Returns:
            Self for method chaining
        """
        try:
            kind = SourceKind(kind)
        except ValueError as e:
            valid = ", ".join(k.value for k in SourceKind)
            raise ConfigError(f"Unknown source kind: {kind!r}. Valid kinds: {valid}") from e

        known = self._patterns.setdefault(kind, [])
        for pattern in patterns:
            pattern = pattern.lower()
            if pattern not in known:
                known.append(pattern)
        return self

    def unregister(self, kind: SourceKind | str) -> "ScannerRegistry":
        """Remove a source kind and all its patterns."""
        self._patterns.pop(SourceKind(kind), None)
        return self

    @property
    def kinds(self) -> list[SourceKind]:
        """Registered kinds in selection order."""
        return list(self._patterns)

    def patterns_for(self, kind: SourceKind | str) -> list[str]:
        return list(self._patterns.get(SourceKind(kind), []))

    def all_patterns(self) -> list[str]:
        return [p for patterns in self._patterns.values() for p in patterns]

    def detect(self, path: Path | str) -> SourceKind | None:
        """
        Detect the source kind of a file from its name.

        Returns:
            The first matching kind, or None if nothing matches
        """
        name = Path(path).name.lower()
        for kind, patterns in self._patterns.items():
            if any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns):
                return kind
        return None

    def handles(self, path: Path | str) -> bool:
        """Check whether any registered kind handles the file."""
        return self.detect(path) is not None

    def select(self, path: Path | str) -> LanguageScanner:
        """
        Select the scanner for a file.

        Raises:
            UnsupportedFileType: If no registered kind matches
        """
        kind = self.detect(path)
        if kind is None:
            raise UnsupportedFileType(path)
        logger.debug(f"Selected {kind.value} scanner for {path}")
        return _SCANNERS[kind]


# Global default registry instance
_default_registry = ScannerRegistry()


def get_default_registry() -> ScannerRegistry:
    """Get the global default scanner registry."""
    return _default_registry


def scrub(text: str, kind: SourceKind | str, config: ScrubConfig | None = None) -> str:
    """Scrub ``text`` with the scanner for ``kind``."""
    return get_scanner(kind).scrub(text, config)
