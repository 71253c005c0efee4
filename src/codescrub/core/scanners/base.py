"""
Base classes for language scanners.

A scanner knows one language family's comment, documentation, region and
whitespace conventions. Scanners are stateless; all line-to-line state lives
inside a single call.
"""

from abc import ABC, abstractmethod
from enum import Enum

from codescrub.core.config import ScrubConfig
from codescrub.core.scanners.pipeline import TransformPipeline


class SourceKind(str, Enum):
    """Language families with a dedicated scanner."""

    C_FAMILY = "c_family"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    HTML = "html"
    CSS = "css"


class LanguageScanner(ABC):
    """Abstract base class for language-specific scrubbing."""

    kind: SourceKind

    @abstractmethod
    def strip_comments(self, text: str) -> str:
        """Remove line and block comments, keeping documentation comments."""
        pass

    def strip_docs(self, text: str) -> str:
        """Remove documentation comments. No-op for languages without a convention."""
        return text

    def strip_regions(self, text: str) -> str:
        """Remove region marker lines. No-op for languages without region directives."""
        return text

    def strip_empty_lines(self, text: str) -> str:
        """
        Drop every whitespace-only line.

        Lines that sit inside a multi-line literal are content, not layout,
        and are kept. A trailing newline survives if the input had one.
        """
        trailing_newline = text.endswith("\n")
        lines = text.split("\n")
        if trailing_newline:
            lines.pop()

        protected = self.literal_lines(text)
        kept = [line for i, line in enumerate(lines) if line.strip() or i in protected]
        if not kept:
            return ""
        result = "\n".join(kept)
        return result + "\n" if trailing_newline else result

    @abstractmethod
    def optimize_whitespace(self, text: str) -> str:
        """Trim trailing whitespace and apply the language's compaction rules."""
        pass

    def literal_lines(self, text: str) -> set[int]:
        """Indices of lines that begin inside a multi-line literal."""
        return set()

    def scrub(self, text: str, config: ScrubConfig | None = None) -> str:
        """
        Run the full transform pipeline for this language.

        Args:
            text: Source text
            config: Which optional transforms to apply; defaults to ScrubConfig()

        Returns:
            Scrubbed text
        """
        return TransformPipeline.from_config(config or ScrubConfig()).run(text, self)
