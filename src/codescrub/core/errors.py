"""Exception types for codescrub."""

from pathlib import Path


class CodescrubError(Exception):
    """Base exception for conversion errors."""

    pass


class UnsupportedFileType(CodescrubError):
    """No registered scanner declares a capability for the file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"No scanner available for file: {self.path}")


class IOFailure(CodescrubError):
    """Reading or writing a specific file failed.

    Raised per file; the orchestrator records it and moves on to the next one.
    """

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class SetupFailure(CodescrubError):
    """The run cannot start (invalid source root, uncreatable destination)."""

    pass


class ConfigError(CodescrubError, ValueError):
    """Invalid configuration file or value."""

    pass
