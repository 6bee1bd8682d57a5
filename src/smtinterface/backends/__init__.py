"""
Backends run a solver and move bytes to and from it.
"""
from typing import Optional

from ..config import SMTSolver, SmtConfig
from .backend import Backend
from .process import ChildProcess, StderrSink
from .z3lib import EmbeddedLibrary


def spawn_backend(
    config: SmtConfig, stderr_sink: Optional[StderrSink] = None
) -> Backend:
    """
    Start the solver ``config`` asks for.
    """
    if config.solver == SMTSolver.Z3MEM:
        return EmbeddedLibrary()
    return ChildProcess(
        config.solver_args(),
        buffer_size=config.buffer_size,
        stderr_sink=stderr_sink,
    )
