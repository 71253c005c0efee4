"""
Escape-aware delimiter search shared by every scanner.
"""


def is_escaped(text: str, index: int) -> bool:
    """
    Check whether the character at ``index`` is escaped.

    A character is escaped when it is preceded by an odd number of
    consecutive backslashes. ``index`` may equal ``len(text)``, which asks
    whether the line ends in a dangling (continuation) backslash.
    """
    count = 0
    pos = index - 1
    while pos >= 0 and text[pos] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def find_unescaped(text: str, token: str, start: int = 0) -> int:
    """
    Find the first occurrence of ``token`` at or after ``start`` that is not escaped.

    Returns:
        Index of the occurrence, or -1 if there is none.
    """
    idx = text.find(token, start)
    while idx != -1 and is_escaped(text, idx):
        idx = text.find(token, idx + 1)
    return idx
