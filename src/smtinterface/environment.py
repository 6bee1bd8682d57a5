"""
The symbol environment consumed by a session: symbol sorts, literal
constants, datatype declarations, theory symbols and the sort pairs used by
higher-order application.
"""
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pysmt.typing import PySMTType

from .sorts import DataDecl, SmtSort


class TheoryKind(str, Enum):
    THEORY = "theory"
    CTOR = "ctor"
    TEST = "test"
    FIELD = "field"
    UNINTERP = "uninterp"

    def interpreted(self) -> bool:
        """Interpreted symbols are built into the solver and never declared."""
        return self != TheoryKind.UNINTERP


class TheorySymbol(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    sort: PySMTType
    interp: TheoryKind = TheoryKind.UNINTERP
    smt_name: Optional[str] = None
    """Name the solver knows the symbol by, if different"""


class SymEnv(BaseModel):
    """
    Read-only view of the symbols a session must know about.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    sorts: Dict[str, PySMTType] = Field(default_factory=dict)
    """Sorts of every symbol that may occur in a query"""
    lits: Dict[str, PySMTType] = Field(default_factory=dict)
    """Literal constants, pairwise distinct within a sort"""
    data: Dict[str, DataDecl] = Field(default_factory=dict)
    """Datatype declarations by name"""
    theory: Dict[str, TheorySymbol] = Field(default_factory=dict)
    """Symbols provided by the theory catalog"""
    appls: Dict[Tuple[SmtSort, SmtSort], int] = Field(default_factory=dict)
    """(argument, result) sort pairs used by higher-order application"""

    def lookup_theory(self, name: str) -> Optional[TheorySymbol]:
        return self.theory.get(name)

    def smt_name(self, name: str) -> str:
        ts = self.theory.get(name)
        if ts is not None and ts.smt_name is not None:
            return ts.smt_name
        return name

    def helper_name(self, prefix: str, pair: Tuple[SmtSort, SmtSort]) -> str:
        """
        Name of the first-order helper standing for ``prefix`` at the sort
        pair ``pair``, e.g. ``apply$0``.
        """
        if pair not in self.appls:
            raise KeyError(f"No application sort registered for {pair}")
        return f"{prefix}${self.appls[pair]}"

    def add_appl(self, pair: Tuple[SmtSort, SmtSort]) -> int:
        if pair not in self.appls:
            self.appls[pair] = len(self.appls)
        return self.appls[pair]
