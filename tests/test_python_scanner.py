"""
Tests for the Python scanner: hash comments and docstring removal.
"""

from codescrub.core.config import ScrubConfig
from codescrub.core.scanners import PythonScanner


class TestComments:
    """Hash comments outside strings are removed."""

    def test_trailing_comment_removed(self):
        assert PythonScanner().strip_comments("x = 1  # one") == "x = 1"

    def test_hash_in_string_kept(self):
        text = "s = '# not a comment'  # but this is"
        assert PythonScanner().strip_comments(text) == "s = '# not a comment'"

    def test_hash_in_triple_quoted_string_kept(self):
        text = 's = """\n# still text\n"""\n# gone\nx = 1'
        assert PythonScanner().strip_comments(text) == 's = """\n# still text\n"""\nx = 1'

    def test_docstrings_survive_comment_strip(self):
        text = 'def f():\n    """Doc."""\n    return 1  # result\n'
        assert PythonScanner().strip_comments(text) == 'def f():\n    """Doc."""\n    return 1\n'


class TestDocstrings:
    """Docstrings are removed only in docstring position."""

    def test_function_docstring_removed(self):
        text = 'def f():\n    """Doc."""\n    return 1'
        assert PythonScanner().strip_docs(text) == "def f():\n    return 1"

    def test_module_docstring_removed(self):
        text = '"""Module doc."""\nimport os\n'
        assert PythonScanner().strip_docs(text) == "import os\n"

    def test_multi_line_docstring_removed(self):
        text = 'def f():\n    """\n    Doc.\n\n    More.\n    """\n    return 1'
        assert PythonScanner().strip_docs(text) == "def f():\n    return 1"

    def test_docstring_only_body_gets_pass(self):
        text = 'class A:\n    """Only a docstring."""\n'
        assert PythonScanner().strip_docs(text) == "class A:\n    pass\n"

    def test_docstring_only_method_followed_by_sibling(self):
        text = (
            "class A:\n"
            "    def f(self):\n"
            '        """Abstract."""\n'
            "\n"
            "    def g(self):\n"
            "        return 2\n"
        )
        assert PythonScanner().strip_docs(text) == (
            "class A:\n"
            "    def f(self):\n"
            "        pass\n"
            "\n"
            "    def g(self):\n"
            "        return 2\n"
        )

    def test_multi_line_header_with_docstring(self):
        text = 'def f(\n    a,\n    b,\n):\n    """Doc."""\n    return a + b'
        assert PythonScanner().strip_docs(text) == "def f(\n    a,\n    b,\n):\n    return a + b"

    def test_assigned_string_is_not_a_docstring(self):
        text = 'def f():\n    x = 1\n    s = """text"""\n    return s'
        assert PythonScanner().strip_docs(text) == text

    def test_second_string_statement_is_kept(self):
        text = 'def f():\n    """Doc."""\n    """Not doc."""\n    return 1'
        assert PythonScanner().strip_docs(text) == 'def f():\n    """Not doc."""\n    return 1'

    def test_raw_prefixed_docstring_removed(self):
        text = 'def f():\n    r"""Regex \\d+."""\n    return 1'
        assert PythonScanner().strip_docs(text) == "def f():\n    return 1"

    def test_unterminated_docstring_left_alone(self):
        text = 'def f():\n    """never closed\n    return 1'
        assert PythonScanner().strip_docs(text) == text


class TestWhitespace:
    """Python whitespace is significant, so only trailing blanks go."""

    def test_only_trailing_whitespace_trimmed(self):
        text = "if x:   \n    y  =  2   "
        assert PythonScanner().optimize_whitespace(text) == "if x:\n    y  =  2"

    def test_blank_lines_in_multiline_string_kept(self):
        text = 's = """a\n\nb"""\n\nx = 1\n'
        assert PythonScanner().strip_empty_lines(text) == 's = """a\n\nb"""\nx = 1\n'


def test_full_scrub():
    text = (
        '"""Utilities."""\n'
        "\n"
        "import os  # stdlib\n"
        "\n"
        "\n"
        "def home():\n"
        '    """Return the home directory."""\n'
        "    return os.path.expanduser('~')   \n"
    )
    config = ScrubConfig(strip_docs=True, strip_empty_lines=True, optimize_whitespace=True)
    assert PythonScanner().scrub(text, config) == (
        "import os\n"
        "def home():\n"
        "    return os.path.expanduser('~')\n"
    )
