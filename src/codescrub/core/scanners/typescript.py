"""
Scanner for TypeScript and JavaScript sources, including Angular components.
"""

from codescrub.core.scanners.base import SourceKind
from codescrub.core.scanners.lexer import LexerScanner, LexicalSyntax, LiteralRule

TYPESCRIPT_SYNTAX = LexicalSyntax(
    line_comments=("//",),
    block_comment=("/*", "*/"),
    doc_block_pattern=r"/\*\*(?![*/])",
    literals=(
        LiteralRule("'", "'"),
        LiteralRule('"', '"'),
        LiteralRule("`", "`", multiline=True),
    ),
    regex_literals=True,
)


class TypeScriptScanner(LexerScanner):
    """
    Scrubs TypeScript and JavaScript.

    Template literals may span lines. A ``/`` starts a regular expression
    literal when it follows an operator, an opening bracket or a keyword
    such as ``return``; otherwise it is a division.
    """

    kind = SourceKind.TYPESCRIPT
    syntax = TYPESCRIPT_SYNTAX
