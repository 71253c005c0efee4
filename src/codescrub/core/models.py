"""
Core data models shared by the conversion pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from codescrub.core.errors import ConfigError, IOFailure


class OutputLayout(str, Enum):
    """Directory strategy for converted files."""

    SUPER_FLAT = "super-flat"
    FLAT = "flat"
    STRUCTURED = "structured"

    @classmethod
    def parse(cls, value: "OutputLayout | str") -> "OutputLayout":
        """
        Parse a layout from user input.

        Accepts enum members, values ("super-flat"), names ("SUPER_FLAT")
        and the loose spellings "superflat" / "super_flat".

        Raises:
            ConfigError: If the value names no layout
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "").replace("-", "").replace(" ", "")
        for layout in cls:
            if layout.value.replace("-", "") == key:
                return layout
        valid = ", ".join(layout.value for layout in cls)
        raise ConfigError(f"Invalid output layout: {value!r}. Valid layouts: {valid}")


@dataclass(frozen=True)
class SourceUnit:
    """
    A source file and its raw text content.

    Attributes:
        path: Path to the source file
        content: Decoded file content with newlines normalized to ``\\n``
    """

    path: Path
    content: str

    @classmethod
    def read(cls, path: Path) -> "SourceUnit":
        """
        Read a source file as UTF-8.

        Raises:
            IOFailure: If the file cannot be read or decoded
        """
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise IOFailure(path, f"Failed to decode file as UTF-8 ({e.reason})") from e
        except OSError as e:
            raise IOFailure(path, f"Failed to read file ({e.strerror or e})") from e
        return cls(path=path, content=content)
