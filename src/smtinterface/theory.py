"""
The theory catalog supplies solver specific preamble text, axioms for
literal constants and the interpretation of theory symbols.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from pysmt.fnode import FNode
from pysmt.shortcuts import Equals, Int, StrLength, Symbol
from pysmt.typing import PySMTType

from .config import SMTSolver, SmtConfig
from .constants import LIT_PREFIX
from .environment import SymEnv, TheoryKind


class TheoryCatalog(ABC):
    @abstractmethod
    def preamble(self, config: SmtConfig, solver: SMTSolver) -> List[str]:
        """
        Declarations and definitions sent once, before any query.
        """
        pass

    @abstractmethod
    def axiom_literals(
        self, lits: List[Tuple[str, PySMTType]]
    ) -> List[FNode]:
        """
        Axioms about the literal constants ``lits``.
        """
        pass

    def interp(self, env: SymEnv, name: str) -> Optional[TheoryKind]:
        """
        How the solver knows ``name``, or None if the theory does not
        mention it.
        """
        ts = env.lookup_theory(name)
        return ts.interp if ts is not None else None


class BasicTheoryCatalog(TheoryCatalog):
    """
    Catalog with no background theory beyond the solver's own.  String
    literals named ``lit$<text>`` get a length axiom.
    """

    def preamble(self, config: SmtConfig, solver: SMTSolver) -> List[str]:
        if config.string_theory:
            return ["(define-sort Str () String)"]
        return []

    def axiom_literals(
        self, lits: List[Tuple[str, PySMTType]]
    ) -> List[FNode]:
        return [
            Equals(
                StrLength(Symbol(x, t)), Int(len(x[len(LIT_PREFIX) :]))
            )
            for x, t in lits
            if t.is_string_type() and x.startswith(LIT_PREFIX)
        ]
