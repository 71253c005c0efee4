"""
Ordered text transforms applied to a source file.

Comment stripping always runs first; the remaining steps are switched on
by ScrubConfig and always run in the order declared by TransformStep.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from codescrub.core.config import ScrubConfig

if TYPE_CHECKING:
    from codescrub.core.scanners.base import LanguageScanner

logger = logging.getLogger(__name__)


class TransformStep(str, Enum):
    """Pipeline steps. Values name the scanner method that implements each step."""

    STRIP_COMMENTS = "strip_comments"
    STRIP_DOCS = "strip_docs"
    STRIP_REGIONS = "strip_regions"
    STRIP_EMPTY_LINES = "strip_empty_lines"
    OPTIMIZE_WHITESPACE = "optimize_whitespace"


@dataclass(frozen=True)
class TransformPipeline:
    """An immutable, ordered selection of transform steps."""

    steps: tuple[TransformStep, ...]

    @classmethod
    def from_config(cls, config: ScrubConfig) -> "TransformPipeline":
        enabled = {
            TransformStep.STRIP_COMMENTS: True,
            TransformStep.STRIP_DOCS: config.strip_docs,
            TransformStep.STRIP_REGIONS: config.strip_regions,
            TransformStep.STRIP_EMPTY_LINES: config.strip_empty_lines,
            TransformStep.OPTIMIZE_WHITESPACE: config.optimize_whitespace,
        }
        return cls(steps=tuple(step for step in TransformStep if enabled[step]))

    def run(self, text: str, scanner: "LanguageScanner") -> str:
        """
        Apply every step to ``text`` using ``scanner``'s implementations.

        Line endings are normalized to ``\\n`` before the first step.
        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        for step in self.steps:
            text = getattr(scanner, step.value)(text)
        logger.debug(
            f"Applied {len(self.steps)} step(s) with {type(scanner).__name__}: "
            f"{', '.join(step.value for step in self.steps)}"
        )
        return text
