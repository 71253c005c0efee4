"""
Scanners - per-language comment, documentation, region and whitespace scrubbing.
"""

from codescrub.core.scanners.base import LanguageScanner, SourceKind
from codescrub.core.scanners.c_family import CFamilyScanner
from codescrub.core.scanners.escape import find_unescaped, is_escaped
from codescrub.core.scanners.lexer import (
    EscapeStyle,
    Lexer,
    LexerScanner,
    LexicalSyntax,
    LiteralRule,
    ScanState,
    SpanKind,
)
from codescrub.core.scanners.markup import CssScanner, HtmlScanner
from codescrub.core.scanners.pipeline import TransformPipeline, TransformStep
from codescrub.core.scanners.python import PythonScanner
from codescrub.core.scanners.registry import (
    ScannerRegistry,
    get_default_registry,
    get_scanner,
    scrub,
)
from codescrub.core.scanners.typescript import TypeScriptScanner

__all__ = [
    # Base
    "LanguageScanner",
    "SourceKind",
    "is_escaped",
    "find_unescaped",
    # Lexer
    "Lexer",
    "LexerScanner",
    "LexicalSyntax",
    "LiteralRule",
    "EscapeStyle",
    "ScanState",
    "SpanKind",
    # Scanners
    "CFamilyScanner",
    "TypeScriptScanner",
    "PythonScanner",
    "HtmlScanner",
    "CssScanner",
    # Pipeline
    "TransformPipeline",
    "TransformStep",
    # Registry
    "ScannerRegistry",
    "get_default_registry",
    "get_scanner",
    "scrub",
]
