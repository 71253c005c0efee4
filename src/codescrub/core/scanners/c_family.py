"""
Scanner for C-family sources: C#, Java, C and C++.
"""

import re

from codescrub.core.scanners.base import SourceKind
from codescrub.core.scanners.lexer import EscapeStyle, LexerScanner, LexicalSyntax, LiteralRule

C_FAMILY_SYNTAX = LexicalSyntax(
    line_comments=("//",),
    block_comment=("/*", "*/"),
    doc_line_comments=(r"///(?!/)",),
    doc_block_pattern=r"/\*\*(?![*/])",
    literals=(
        LiteralRule('"', '"'),
        LiteralRule("'", "'"),
        LiteralRule('"""', '"""', multiline=True),
        LiteralRule('$"', '"', interpolated=True),
        LiteralRule('@"', '"', multiline=True, escape=EscapeStyle.DOUBLED),
        LiteralRule('$@"', '"', multiline=True, escape=EscapeStyle.DOUBLED, interpolated=True),
        LiteralRule('@$"', '"', multiline=True, escape=EscapeStyle.DOUBLED, interpolated=True),
    ),
)

# "#region Name", "#endregion", "#pragma region", "#pragma endregion"
REGION_MARKER_PATTERN = re.compile(r"^\s*#\s*(?:pragma\s+)?(?:region|endregion)\b")

# "#define", "#include", "#if" ...
DIRECTIVE_PATTERN = re.compile(r"^\s*#")


class CFamilyScanner(LexerScanner):
    """
    Scrubs C#, Java, C and C++.

    Documentation is ``///`` lines and ``/** */`` blocks. Whitespace
    optimization also removes leading indentation, which none of these
    languages depends on. Preprocessor lines keep the spaces around their
    punctuation: ``#define F (x)`` and ``#define F(x)`` are different macros.
    """

    kind = SourceKind.C_FAMILY
    syntax = C_FAMILY_SYNTAX
    strip_indentation = True
    directive_pattern = DIRECTIVE_PATTERN

    def strip_regions(self, text: str) -> str:
        """Drop region marker lines; markers inside literals are left alone."""
        masked, literals = self.lexer.mask_literals(text)
        kept = [line for line in masked.split("\n") if not REGION_MARKER_PATTERN.match(line)]
        return self.lexer.unmask_literals("\n".join(kept), literals)
