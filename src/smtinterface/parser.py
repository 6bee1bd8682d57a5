"""
Incremental parser for solver responses.

    response := 'sat' | 'unsat' | 'unknown' | '(' sexp
    sexp     := 'error' '"' text '"' ')' | pair+ ')'
    pair     := '(' symbol value ')'

Values are kept as the text the solver printed, e.g. ``5`` or ``(- 5)``.
"""
import logging
from typing import Callable, Optional

from pyparsing import (
    CharsNotIn,
    Group,
    Keyword,
    OneOrMore,
    ParseBaseException,
    Regex,
    StringEnd,
    Suppress,
    nested_expr,
    original_text_for,
)

from .errors import IncompleteResponseError, ResponseParseError
from .protocol.response import Error, Response, Sat, Unknown, Unsat, Values
from .utils.sexp import is_complete

l = logging.getLogger(__name__)

Pull = Callable[[], Optional[str]]

_LPAR = Suppress("(")
_RPAR = Suppress(")")

_sat = Keyword("sat").set_parse_action(lambda: Sat())
_unsat = Keyword("unsat").set_parse_action(lambda: Unsat())
_unknown = Keyword("unknown").set_parse_action(lambda: Unknown())

_error_text = CharsNotIn('"').leave_whitespace()
_error = (
    Suppress(Keyword("error"))
    + Suppress('"')
    + _error_text
    + Suppress('"').leave_whitespace()
    + _RPAR
).set_parse_action(lambda t: Error(message=t[0]))

_string = Regex(r'"(?:[^"]|"")*"')
_sexp_text = original_text_for(nested_expr())
_symbol = Regex(r"\|[^|]*\|") | Regex(r"[^\s()|]+") | _sexp_text
_value = _sexp_text | _string | Regex(r"[^\s()]+")
_pair = Group(_LPAR + _symbol + _value + _RPAR)
_values = (OneOrMore(_pair) + _RPAR).set_parse_action(
    lambda t: Values(pairs=[(p[0], p[1]) for p in t])
)

RESPONSE = ((_LPAR + (_error | _values)) | _unsat | _unknown | _sat) + StringEnd()


def parse_response(text: str, pull: Optional[Pull] = None) -> Response:
    """
    Parse one response from ``text``, asking ``pull`` for more solver output
    while the text so far cannot be a complete response.

    Parameters
    ----------
    text : str
        solver output already at hand
    pull : Callable[[], Optional[str]], optional
        returns the next record of solver output, or None when there is
        no more

    Returns
    -------
    Response
        the parsed response; a solver (error ...) is returned as Error

    Raises
    ------
    IncompleteResponseError
        solver output ended in the middle of a response
    ResponseParseError
        the output is not a response
    """
    buf = text
    while not is_complete(buf):
        more = pull() if pull is not None else None
        if more is None:
            raise IncompleteResponseError(
                f"Unexpected end of solver output: {buf!r}", buf
            )
        buf = f"{buf}\n{more}" if buf else more
    try:
        return RESPONSE.parse_string(buf.strip(), parse_all=True)[0]
    except ParseBaseException as e:
        raise ResponseParseError(
            f"Cannot parse solver response {buf!r}: {e}", buf
        ) from e
