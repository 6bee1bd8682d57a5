"""
Exceptions raised while talking to an SMT solver.

Setup, parse and I/O failures abort the current query.  Solver-reported
errors come back from the parser as data and only become an
``SmtCrashError`` when the session cannot continue past them.
"""
from typing import Optional

from pysmt.exceptions import PysmtException, UnknownSolverAnswerError


class SmtError(PysmtException):
    """Base class for smtinterface errors."""


class SetupError(SmtError):
    """
    The solver could not be configured, e.g. an unparseable version string or
    string theory requested from a solver that does not support it.
    """


class SerializationError(SmtError):
    """A command could not be rendered as SMTLIB2 text."""


class ResponseParseError(SmtError):
    """Solver output did not match the response grammar."""

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.text = text


class IncompleteResponseError(ResponseParseError):
    """Solver output ended before a complete response was read."""


class SolverIOError(SmtError):
    """Writing to or reading from the solver failed."""


class SmtCrashError(SmtError, UnknownSolverAnswerError):
    """
    The solver answered a command with something the session cannot
    recover from.  ``response`` is the offending response (if any) and
    ``span`` the source location of the query that triggered it.
    """

    def __init__(
        self,
        message: str,
        response: Optional["Response"] = None,
        span: Optional["SrcSpan"] = None,
    ) -> None:
        if span is not None:
            message = f"{span}: {message}"
        super().__init__(message)
        self.response = response
        self.span = span
