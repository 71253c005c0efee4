"""
Regex-based scanners for HTML templates and stylesheets.

Markup and stylesheet comments have no escape ambiguity, so a single
multi-line sweep replaces the line lexer. A comment that fills its lines
entirely is removed together with those lines; an inline comment is cut out
of the line that holds it.
"""

import re

from codescrub.core.scanners.base import LanguageScanner, SourceKind


class RegexCommentScanner(LanguageScanner):
    """Removes comments matched by ``comment_pattern``."""

    # Must tolerate an unterminated comment by running to end of text
    comment_pattern: re.Pattern[str]

    def __init__(self):
        body = self.comment_pattern.pattern
        self._whole_line_pattern = re.compile(rf"^[ \t]*(?:{body})[ \t]*(?:\n|\Z)", re.MULTILINE)

    def strip_comments(self, text: str) -> str:
        text = self._whole_line_pattern.sub("", text)
        return self.comment_pattern.sub("", text)


class HtmlScanner(RegexCommentScanner):
    """
    Scrubs HTML and Angular component templates.

    Conditional comments (``<!--[if IE]>``) carry behaviour and are kept.
    """

    kind = SourceKind.HTML
    comment_pattern = re.compile(r"<!--(?!\[if)(?:(?!-->)[\s\S])*(?:-->|\Z)")

    _BETWEEN_TAGS = re.compile(r">[ \t]+<")
    _RUN = re.compile(r"[ \t]{2,}")

    def optimize_whitespace(self, text: str) -> str:
        lines = []
        for line in text.split("\n"):
            line = line.strip(" \t")
            line = self._BETWEEN_TAGS.sub("><", line)
            lines.append(self._RUN.sub(" ", line))
        return "\n".join(lines)


class CssScanner(RegexCommentScanner):
    """Scrubs CSS, SCSS and Less stylesheets."""

    kind = SourceKind.CSS
    comment_pattern = re.compile(r"/\*(?:(?!\*/)[\s\S])*(?:\*/|\Z)")

    _AROUND_PUNCT = re.compile(r"[ \t]*([{}:;,])[ \t]*")
    _RUN = re.compile(r"[ \t]{2,}")

    def optimize_whitespace(self, text: str) -> str:
        lines = []
        for line in text.split("\n"):
            line = self._RUN.sub(" ", line.strip(" \t"))
            lines.append(self._AROUND_PUNCT.sub(r"\1", line))
        return "\n".join(lines)
