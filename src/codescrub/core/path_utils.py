"""
Path validation utilities for codescrub.

Shared by the conversion service and the CLI so both report the same
messages for an unusable source or destination.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class PathValidationResult:
    """Result of path validation.

    Attributes:
        valid: True if the path is valid for the requested operation.
        error_message: Human-readable error message if validation failed.
    """
    valid: bool
    error_message: Optional[str] = None


def validate_source_root(path: str | Path) -> PathValidationResult:
    """
    Validate that a path can be converted.

    Checks that the path exists and is a directory.
    """
    try:
        p = Path(path)

        if not p.exists():
            return PathValidationResult(valid=False, error_message=f"Path '{path}' does not exist")

        if not p.is_dir():
            return PathValidationResult(valid=False, error_message=f"Path '{path}' is not a directory")

        return PathValidationResult(valid=True)

    except (OSError, ValueError) as e:
        return PathValidationResult(valid=False, error_message=f"Invalid path '{path}': {e}")


def validate_destination(dest: str | Path, source_root: str | Path) -> PathValidationResult:
    """
    Validate a destination directory for a source root.

    The destination must be given, must not be an existing file, and must
    not be the source root itself. A destination nested inside the source
    root is allowed; discovery skips it.
    """
    if not str(dest).strip():
        return PathValidationResult(valid=False, error_message="Destination directory is required")

    try:
        d = Path(dest)
        if d.exists() and not d.is_dir():
            return PathValidationResult(
                valid=False, error_message=f"Destination '{dest}' is not a directory"
            )
        if d.resolve() == Path(source_root).resolve():
            return PathValidationResult(
                valid=False, error_message="Destination must differ from the source directory"
            )
        return PathValidationResult(valid=True)

    except (OSError, ValueError) as e:
        return PathValidationResult(valid=False, error_message=f"Invalid path '{dest}': {e}")


def ensure_directory_exists(path: Path) -> bool:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Returns:
        True if the directory exists or was created successfully,
        False if creation failed (e.g., permission error).
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError:
        return False
