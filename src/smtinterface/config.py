"""
This module defines SmtConfig, the configuration object for an SMT solver
session.
"""
import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .constants import BUFFER_SIZE, SOLVER_ARGS

l = logging.getLogger(__name__)


class SMTSolver(str, Enum):
    """
    Solver kinds understood by the session.  ``z3mem`` runs z3 in-process
    through its Python bindings instead of as a subprocess.
    """

    Z3 = "z3"
    Z3MEM = "z3mem"
    CVC4 = "cvc4"
    MATHSAT = "mathsat"

    def is_z3(self) -> bool:
        return self in (SMTSolver.Z3, SMTSolver.Z3MEM)


class SmtConfig(BaseModel):
    """
    Base definition of a configuration object
    """

    model_config = ConfigDict(
        validate_default=True,
    )

    solver: SMTSolver = SMTSolver.Z3
    """Solver kind used for the session"""
    smt_timeout: Optional[int] = None
    """Solver timeout in milliseconds, passed through (set-option :timeout)"""
    gradual: bool = False
    """Gradual typing mode, leaves model based quantifier instantiation on"""
    string_theory: bool = False
    """Whether queries use the theory of strings"""
    solver_command: Optional[List[str]] = None
    """Replaces the solver's argument vector when set"""
    transcript_dir: str = ".smt"
    """Directory (relative to the target file) for .smt2 transcripts"""
    verbose: bool = False
    """Log every parsed solver response at INFO level"""
    buffer_size: int = BUFFER_SIZE
    """Block buffer size for solver pipes and transcripts"""

    @field_validator("solver")
    @classmethod
    def import_z3(cls, v: SMTSolver) -> SMTSolver:
        if v == SMTSolver.Z3MEM:
            try:
                import z3  # noqa: F401
            except ImportError:
                raise ValueError(
                    "The z3 package failed to import. Do you have z3-solver installed?"
                )
        return v

    @field_validator("smt_timeout")
    @classmethod
    def positive_timeout(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError(f"smt_timeout must be positive, got {v}")
        return v

    def solver_args(self) -> List[str]:
        if self.solver_command is not None:
            return list(self.solver_command)
        if self.solver.value not in SOLVER_ARGS:
            raise ValueError(f"Solver {self.solver.value} is not a subprocess")
        return list(SOLVER_ARGS[self.solver.value])
