"""
Conversion Service data models.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ConversionOutcome:
    """Result of a conversion run.

    Invariant once the run is over: ``total == succeeded + failed``.
    """

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)

    def record_success(self, destination: Path) -> None:
        self.succeeded += 1
        self.written.append(destination)

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    @property
    def is_complete(self) -> bool:
        return self.total == self.succeeded + self.failed

    @property
    def has_failures(self) -> bool:
        return self.failed > 0
