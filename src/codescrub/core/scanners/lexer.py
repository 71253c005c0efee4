"""
Line-oriented lexer shared by the C-family, TypeScript and Python scanners.

The lexer does not parse. It splits each line into spans tagged as code,
literal, comment or documentation, carrying open block comments and
multi-line literals across lines in a ScanState. Delimiters come from a
per-language LexicalSyntax, so one engine serves every brace-or-hash
language.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from codescrub.core.scanners.base import LanguageScanner
from codescrub.core.scanners.escape import find_unescaped, is_escaped


class SpanKind(str, Enum):
    """Classification of a piece of a source line."""

    CODE = "code"
    LITERAL = "literal"
    COMMENT = "comment"
    DOC = "doc"


class EscapeStyle(str, Enum):
    """How a closing delimiter is escaped inside a literal."""

    BACKSLASH = "backslash"  # "a\"b"
    DOUBLED = "doubled"  # @"a""b"
    NONE = "none"


@dataclass(frozen=True)
class LiteralRule:
    """
    A string or template literal form.

    Attributes:
        interpolated: ``{...}`` holes hold code, so quotes inside them do
            not close the literal (C# ``$"..."``)
    """

    opener: str
    closer: str
    multiline: bool = False
    escape: EscapeStyle = EscapeStyle.BACKSLASH
    interpolated: bool = False


@dataclass(frozen=True)
class LexicalSyntax:
    """
    Delimiters of one language family.

    Attributes:
        line_comments: Markers that comment out the rest of the line
        block_comment: (opener, closer) of block comments, if any
        doc_line_comments: Regex patterns of documentation line markers
        doc_block_pattern: Regex of a documentation block opener; closed like
            an ordinary block comment
        literals: String and template literal forms
        regex_literals: Whether ``/.../`` may start a regular expression literal
    """

    line_comments: tuple[str, ...] = ()
    block_comment: tuple[str, str] | None = None
    doc_line_comments: tuple[str, ...] = ()
    doc_block_pattern: str | None = None
    literals: tuple[LiteralRule, ...] = ()
    regex_literals: bool = False


@dataclass
class ScanState:
    """
    What is still open at the end of the last scanned line.

    Attributes:
        block: Kind of the open block comment
        literal: Rule of the open multi-line literal
        holes: Interpolation holes open inside ``literal``
        tail: Code at the end of the last line that had any
    """

    block: SpanKind | None = None
    literal: LiteralRule | None = None
    holes: int = 0
    tail: str = ""

    @property
    def in_block_comment(self) -> bool:
        return self.block is not None

    @property
    def in_multiline_literal(self) -> bool:
        return self.literal is not None

    @property
    def literal_delimiter(self) -> str | None:
        return self.literal.closer if self.literal else None


@dataclass(frozen=True)
class ScannedLine:
    """One line with its spans and the scanner state on either side of it."""

    text: str
    spans: list[tuple[SpanKind, str]]
    before: ScanState
    after: ScanState


# Characters after which "/" starts a regular expression rather than a division
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORD_PATTERN = re.compile(
    r"(?:^|[^\w$])(?:return|typeof|instanceof|in|of|new|delete|void|throw|case|do|else|yield|await)$"
)

_MASK_OPEN = "\ue000"
_MASK_CLOSE = "\ue001"
_MASK_PATTERN = re.compile(f"{_MASK_OPEN}(\\d+){_MASK_CLOSE}")


class Lexer:
    """Single-pass tokenizer driven by a LexicalSyntax."""

    def __init__(self, syntax: LexicalSyntax):
        self.syntax = syntax
        self._literal_rules = {rule.opener: rule for rule in syntax.literals}
        self._openers = sorted(self._literal_rules, key=len, reverse=True)
        self._token_pattern = self._compile(syntax)

    @staticmethod
    def _compile(syntax: LexicalSyntax) -> re.Pattern[str] | None:
        """Build one alternation; earlier groups win at the same position."""
        groups: list[str] = []
        if syntax.doc_line_comments:
            groups.append(f"(?P<doc_line>{'|'.join(syntax.doc_line_comments)})")
        if syntax.line_comments:
            markers = sorted(syntax.line_comments, key=len, reverse=True)
            groups.append(f"(?P<line>{'|'.join(re.escape(m) for m in markers)})")
        if syntax.doc_block_pattern and syntax.block_comment:
            groups.append(f"(?P<doc_block>{syntax.doc_block_pattern})")
        if syntax.block_comment:
            groups.append(f"(?P<block>{re.escape(syntax.block_comment[0])})")
        if syntax.literals:
            openers = sorted((rule.opener for rule in syntax.literals), key=len, reverse=True)
            groups.append(f"(?P<literal>{'|'.join(re.escape(o) for o in openers)})")
        if syntax.regex_literals:
            groups.append("(?P<regex>/)")
        if not groups:
            return None
        return re.compile("|".join(groups))

    def scan_line(self, line: str, state: ScanState) -> list[tuple[SpanKind, str]]:
        """
        Split one line (without its newline) into tagged spans.

        ``state`` is updated in place to describe what remains open at the
        end of the line. Concatenating the span texts yields ``line``.
        """
        spans = self._split(line, state)
        code = "".join(piece for kind, piece in spans if kind in (SpanKind.CODE, SpanKind.LITERAL))
        if code.strip():
            state.tail = code.rstrip()
        return spans

    def _split(self, line: str, state: ScanState) -> list[tuple[SpanKind, str]]:
        spans: list[tuple[SpanKind, str]] = []
        pos = 0
        length = len(line)

        if state.block is not None:
            closer = self.syntax.block_comment[1]
            close = line.find(closer)
            if close == -1:
                return [(state.block, line)]
            pos = close + len(closer)
            spans.append((state.block, line[:pos]))
            state.block = None
        elif state.literal is not None:
            rule = state.literal
            end, state.holes = self._find_end(line, 0, rule, state.holes)
            if end == -1:
                if not rule.multiline and not state.holes and not is_escaped(line, length):
                    state.literal = None
                return [(SpanKind.LITERAL, line)]
            spans.append((SpanKind.LITERAL, line[:end]))
            pos = end
            state.literal = None

        while pos < length:
            match = self._next_token(line, pos, state.tail)
            if match is None:
                spans.append((SpanKind.CODE, line[pos:]))
                break

            start = match.start()
            if start > pos:
                spans.append((SpanKind.CODE, line[pos:start]))
            group = match.lastgroup
            token = match.group()

            if group in ("doc_line", "line"):
                kind = SpanKind.DOC if group == "doc_line" else SpanKind.COMMENT
                spans.append((kind, line[start:]))
                break

            if group in ("doc_block", "block"):
                kind = SpanKind.DOC if group == "doc_block" else SpanKind.COMMENT
                closer = self.syntax.block_comment[1]
                close = line.find(closer, start + len(token))
                if close == -1:
                    spans.append((kind, line[start:]))
                    state.block = kind
                    break
                pos = close + len(closer)
                spans.append((kind, line[start:pos]))
                continue

            if group == "literal":
                rule = self._literal_rules[token]
                end, holes = self._find_end(line, start + len(token), rule)
                if end == -1:
                    spans.append((SpanKind.LITERAL, line[start:]))
                    if rule.multiline or holes or is_escaped(line, length):
                        state.literal = rule
                        state.holes = holes
                    break
                spans.append((SpanKind.LITERAL, line[start:end]))
                pos = end
                continue

            # Regular expression literal; an unclosed one was a division after all
            end = self._find_regex_end(line, start + 1)
            if end == -1:
                spans.append((SpanKind.CODE, token))
                pos = start + 1
                continue
            spans.append((SpanKind.LITERAL, line[start:end]))
            pos = end

        return spans

    def _next_token(self, line: str, pos: int, tail: str = "") -> re.Match[str] | None:
        if self._token_pattern is None:
            return None
        match = self._token_pattern.search(line, pos)
        while match is not None:
            start = match.start()
            if is_escaped(line, start):
                match = self._token_pattern.search(line, start + 1)
                continue
            # At the start of a line, the previous line decides
            if match.lastgroup == "regex" and not self._regex_allowed(line[:start].rstrip() or tail):
                match = self._token_pattern.search(line, start + 1)
                continue
            return match
        return None

    @staticmethod
    def _regex_allowed(prefix: str) -> bool:
        prefix = prefix.rstrip()
        if not prefix:
            return True
        if prefix.endswith(("++", "--")):
            return False
        if prefix[-1] in _REGEX_PRECEDERS:
            return True
        return _REGEX_KEYWORD_PATTERN.search(prefix) is not None

    def _find_end(self, line: str, pos: int, rule: LiteralRule, holes: int = 0) -> tuple[int, int]:
        """End of the literal (-1 if open) and the interpolation holes left open."""
        if rule.interpolated:
            return self._find_interpolated_end(line, pos, rule, holes)
        return self._find_literal_end(line, pos, rule), 0

    def _find_interpolated_end(
        self, line: str, pos: int, rule: LiteralRule, holes: int = 0
    ) -> tuple[int, int]:
        """
        Find the closer of an interpolated string.

        Outside holes, ``{{`` and ``}}`` are escaped braces and ``{`` opens a
        hole. Inside a hole the text is code: braces nest and nested
        literals are skipped whole, so their quotes never close the string.

        Returns:
            (index just past the closer or -1, holes still open at the end)
        """
        closer = rule.closer
        i = pos
        n = len(line)
        while i < n:
            if holes == 0:
                if rule.escape is EscapeStyle.BACKSLASH and line[i] == "\\":
                    i += 2
                    continue
                if line.startswith(closer, i):
                    if rule.escape is EscapeStyle.DOUBLED and line.startswith(closer * 2, i):
                        i += 2 * len(closer)
                        continue
                    return i + len(closer), 0
                if line.startswith("{{", i) or line.startswith("}}", i):
                    i += 2
                    continue
                if line[i] == "{":
                    holes = 1
                i += 1
                continue

            opener = next((o for o in self._openers if line.startswith(o, i)), None)
            if opener is not None:
                end, _ = self._find_end(line, i + len(opener), self._literal_rules[opener])
                if end == -1:
                    return -1, holes
                i = end
                continue
            if line[i] == "{":
                holes += 1
            elif line[i] == "}":
                holes -= 1
            i += 1
        return -1, holes

    @staticmethod
    def _find_literal_end(line: str, pos: int, rule: LiteralRule) -> int:
        """Index just past the literal's closer, or -1 if it stays open."""
        closer = rule.closer
        if rule.escape is EscapeStyle.BACKSLASH:
            idx = find_unescaped(line, closer, pos)
            return -1 if idx == -1 else idx + len(closer)

        idx = line.find(closer, pos)
        if rule.escape is EscapeStyle.DOUBLED:
            while idx != -1 and line.startswith(closer * 2, idx):
                idx = line.find(closer, idx + 2 * len(closer))
        return -1 if idx == -1 else idx + len(closer)

    @staticmethod
    def _find_regex_end(line: str, pos: int) -> int:
        in_class = False
        i = pos
        while i < len(line):
            ch = line[i]
            if ch == "\\":
                i += 2
                continue
            if in_class:
                if ch == "]":
                    in_class = False
            elif ch == "[":
                in_class = True
            elif ch == "/":
                return i + 1
            i += 1
        return -1

    def scan(self, text: str) -> list[ScannedLine]:
        """Scan every ``\\n``-separated line of ``text``."""
        state = ScanState()
        result = []
        for line in text.split("\n"):
            before = replace(state)
            spans = self.scan_line(line, state)
            after = replace(state)
            result.append(ScannedLine(line, spans, before, after))
        return result

    def strip_comments(self, text: str, keep_docs: bool = True) -> str:
        """
        Remove comment spans from ``text``.

        Lines without comments are kept verbatim. Lines that lost a comment
        are right-trimmed, and dropped if nothing but whitespace remains.
        """
        removed = {SpanKind.COMMENT} if keep_docs else {SpanKind.COMMENT, SpanKind.DOC}
        out: list[str] = []
        for scanned in self.scan(text):
            if not any(kind in removed for kind, _ in scanned.spans):
                out.append(scanned.text)
                continue
            kept = "".join(piece for kind, piece in scanned.spans if kind not in removed)
            if scanned.after.literal is None:
                kept = kept.rstrip()
            if kept.strip():
                out.append(kept)
        return "\n".join(out)

    def literal_lines(self, text: str) -> set[int]:
        """Indices of lines that begin inside a literal carried over from a previous line."""
        return {i for i, scanned in enumerate(self.scan(text)) if scanned.before.literal is not None}

    def mask_literals(self, text: str) -> tuple[str, list[str]]:
        """
        Replace every literal span with a numbered placeholder.

        Returns:
            The masked text and the literal pieces, indexed by placeholder number
        """
        literals: list[str] = []
        lines = []
        for scanned in self.scan(text):
            pieces = []
            for kind, piece in scanned.spans:
                if kind is SpanKind.LITERAL and piece:
                    pieces.append(f"{_MASK_OPEN}{len(literals)}{_MASK_CLOSE}")
                    literals.append(piece)
                else:
                    pieces.append(piece)
            lines.append("".join(pieces))
        return "\n".join(lines), literals

    @staticmethod
    def unmask_literals(text: str, literals: list[str]) -> str:
        return _MASK_PATTERN.sub(lambda m: literals[int(m.group(1))], text)


_WHITESPACE_RUN = re.compile(r"(?<=\S)[ \t]{2,}")
_SPACE_BEFORE_PUNCT = re.compile(r"(?<=\S)[ \t]+(?=[;,()\[\]{}])")
_SPACE_AFTER_PUNCT = re.compile(r"([;,()\[\]{}])[ \t]+(?=\S)")


class LexerScanner(LanguageScanner):
    """
    A LanguageScanner whose comment handling is driven by a Lexer.

    Subclasses set ``syntax`` and the whitespace switches as class attributes.
    """

    syntax: LexicalSyntax = LexicalSyntax()
    strip_indentation: bool = False
    compact: bool = True
    directive_pattern: re.Pattern[str] | None = None

    def __init__(self):
        self.lexer = Lexer(self.syntax)

    def strip_comments(self, text: str) -> str:
        return self.lexer.strip_comments(text, keep_docs=True)

    def strip_docs(self, text: str) -> str:
        return self.lexer.strip_comments(text, keep_docs=False)

    def literal_lines(self, text: str) -> set[int]:
        return self.lexer.literal_lines(text)

    def optimize_whitespace(self, text: str) -> str:
        """
        Compact whitespace outside literals.

        Trailing whitespace is always trimmed. With ``compact``, runs of
        blanks after the first visible character collapse to one space and
        blanks next to ``; , ( ) [ ] { }`` are removed, except on lines
        matching ``directive_pattern``. With ``strip_indentation``, leading
        indentation goes too.
        """

        def rewrite(line: str) -> str:
            if self.strip_indentation:
                line = line.lstrip(" \t")
            if self.compact:
                line = _WHITESPACE_RUN.sub(" ", line)
                if self.directive_pattern is None or not self.directive_pattern.match(line):
                    line = _SPACE_BEFORE_PUNCT.sub("", line)
                    line = _SPACE_AFTER_PUNCT.sub(r"\1", line)
            return line.rstrip(" \t")

        return self.rewrite_code(text, rewrite)

    def rewrite_code(self, text: str, rewrite: Callable[[str], str]) -> str:
        """Apply ``rewrite`` to each line with literals masked out."""
        masked, literals = self.lexer.mask_literals(text)
        lines = [rewrite(line) for line in masked.split("\n")]
        return self.lexer.unmask_literals("\n".join(lines), literals)
