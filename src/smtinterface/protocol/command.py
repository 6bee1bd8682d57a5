"""
Commands sent to the solver.  Rendering lives in smtinterface.serialize.
"""
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pysmt.fnode import FNode

from ..sorts import DataDecl, SmtSort


class Command(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    def expects_response(self) -> bool:
        """
        Whether the solver answers this command under normal operation.
        """
        return False


class Push(Command):
    pass


class Pop(Command):
    pass


class CheckSat(Command):
    def expects_response(self) -> bool:
        return True


class GetValue(Command):
    terms: List[FNode]

    def expects_response(self) -> bool:
        return True


class Declare(Command):
    name: str
    args: List[SmtSort] = []
    result: SmtSort


class DeclareData(Command):
    decls: List[DataDecl]


class DefineFunc(Command):
    name: str
    params: List[Tuple[str, SmtSort]] = []
    result: SmtSort
    body: FNode


class TriggeredExpr(BaseModel):
    """
    A formula with instantiation patterns.  Patterns only apply when the body
    is a universal quantifier.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    body: FNode
    patterns: List[FNode] = []


class Assert(Command):
    body: FNode
    label: Optional[str] = None


class AssertAxiom(Command):
    triggered: TriggeredExpr


class Distinct(Command):
    terms: List[FNode]


class SetOption(Command):
    key: str
    value: str


class SetMbqi(Command):
    pass


class Exit(Command):
    pass
