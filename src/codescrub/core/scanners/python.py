"""
Scanner for Python sources.

Comments are ``#`` to end of line. Docstrings are string literals, never
comments, so they survive comment stripping and are only removed by the
documentation sweep when they sit in docstring position.
"""

import re

from codescrub.core.scanners.base import SourceKind
from codescrub.core.scanners.lexer import LexerScanner, LexicalSyntax, LiteralRule, ScannedLine, SpanKind

PYTHON_SYNTAX = LexicalSyntax(
    line_comments=("#",),
    literals=(
        LiteralRule("'''", "'''", multiline=True),
        LiteralRule('"""', '"""', multiline=True),
        LiteralRule("'", "'"),
        LiteralRule('"', '"'),
    ),
)

_DOCSTRING_START = re.compile(r"^([ \t]*)[rRuU]?(?:'''|\"\"\")")
_OPENING_BRACKETS = "([{"
_CLOSING_BRACKETS = ")]}"


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


class PythonScanner(LexerScanner):
    """Scrubs Python; whitespace optimization only trims trailing blanks."""

    kind = SourceKind.PYTHON
    syntax = PYTHON_SYNTAX
    compact = False

    def strip_docs(self, text: str) -> str:
        """
        Remove docstrings.

        A triple-quoted string (optionally ``r``/``u`` prefixed) is a
        docstring when it opens the module or follows a block header, a
        line ending in ``:`` outside any bracket. A docstring with code
        after it, or one that never terminates, is left in place. If the
        docstring was the whole body of its block, ``pass`` takes its place.
        """
        scanned = self.lexer.scan(text)
        out: list[str] = []
        docstring_allowed = True
        header_indent: int | None = None
        depth = 0
        i = 0

        while i < len(scanned):
            line = scanned[i]
            match = _DOCSTRING_START.match(line.text) if line.before.literal is None else None
            if docstring_allowed and match:
                end = self._docstring_end(scanned, i)
                if end is not None:
                    i = end + 1
                    docstring_allowed = False
                    if header_indent is not None and self._body_is_empty(scanned, i, header_indent):
                        out.append(f"{match.group(1)}pass")
                    continue

            out.append(line.text)
            i += 1
            if line.before.literal is None and not line.text.strip():
                continue

            code = "".join(piece for kind, piece in line.spans if kind is SpanKind.CODE)
            depth = max(0, depth + sum(code.count(c) for c in _OPENING_BRACKETS)
                        - sum(code.count(c) for c in _CLOSING_BRACKETS))
            is_header = depth == 0 and line.after.literal is None and code.rstrip().endswith(":")
            docstring_allowed = is_header
            if is_header:
                header_indent = self._statement_indent(scanned, i - 1)

        return "\n".join(out)

    @staticmethod
    def _docstring_end(scanned: list[ScannedLine], start: int) -> int | None:
        """Index of the line closing the docstring that opens ``start``, if removable."""
        for j in range(start, len(scanned)):
            if scanned[j].after.literal is not None:
                continue
            spans = scanned[j].spans
            first = next(k for k, (kind, _) in enumerate(spans) if kind is SpanKind.LITERAL)
            rest = "".join(piece for _, piece in spans[first + 1:])
            return j if not rest.strip() else None
        return None

    @staticmethod
    def _statement_indent(scanned: list[ScannedLine], index: int) -> int:
        """Indentation of the statement whose last line is ``index``."""
        # Walk back over continuation lines of a bracketed header
        depth = 0
        for k in range(index, -1, -1):
            line = scanned[k]
            code = "".join(piece for kind, piece in line.spans if kind is SpanKind.CODE)
            depth += sum(code.count(c) for c in _CLOSING_BRACKETS)
            depth -= sum(code.count(c) for c in _OPENING_BRACKETS)
            if depth <= 0 and line.before.literal is None and line.text.strip():
                return _indent_width(line.text)
        return 0

    @staticmethod
    def _body_is_empty(scanned: list[ScannedLine], start: int, header_indent: int) -> bool:
        for line in scanned[start:]:
            if line.text.strip():
                return _indent_width(line.text) <= header_indent
        return True
