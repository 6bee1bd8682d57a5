"""
The smtinterface package is an interactive SMTLIB2 client for external SMT
solvers:

- Context: a session with one solver, synchronous and deferred commands,
  push/pop scoping.

- Backends: solvers as child processes (z3, cvc4, mathsat) or z3 in-process.

- Protocol: commands, responses, the SMTLIB2 encoder and response parser.
"""

from ._version import __version__
from .backends import Backend, ChildProcess, EmbeddedLibrary, spawn_backend
from .config import SMTSolver, SmtConfig
from .context import (
    Context,
    ResponseBacklog,
    cleanup_context,
    make_context,
    make_context_no_log,
    make_context_with_senv,
)
from .declare import declare_all
from .environment import SymEnv, TheoryKind, TheorySymbol
from .errors import *
from .parser import parse_response
from .protocol import *
from .queries import (
    check_valid,
    check_valid_unscoped,
    check_valid_with_context,
    check_valids,
)
from .serialize import encode
from .sorts import *
from .span import SrcSpan
from .theory import BasicTheoryCatalog, TheoryCatalog
