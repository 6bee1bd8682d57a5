"""
Helpers for framing s-expressions in raw solver output.
"""
from typing import Tuple


def balance(text: str) -> Tuple[int, bool]:
    """
    Parenthesis depth at the end of ``text`` and whether a string literal or
    quoted symbol is still open.  Parentheses inside either do not count.
    """
    depth = 0
    in_string = False
    in_quoted = False
    for c in text:
        if in_string:
            if c == '"':
                in_string = False
        elif in_quoted:
            if c == "|":
                in_quoted = False
        elif c == '"':
            in_string = True
        elif c == "|":
            in_quoted = True
        elif c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
    return depth, in_string or in_quoted


def is_complete(text: str) -> bool:
    """
    Whether ``text`` holds at least one token and closes every parenthesis
    and literal it opens.
    """
    if not text.strip():
        return False
    depth, open_literal = balance(text)
    return depth <= 0 and not open_literal
