"""
Wire-level sorts (SmtSort), datatype declarations and the conversion from
pysmt types to the sorts the solver is told about.
"""
import re
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict
from pysmt.typing import PySMTType

if TYPE_CHECKING:
    from .environment import SymEnv

_TOKEN = re.compile(r"[^\s()]+")


class SmtSort(BaseModel):
    """
    A sort as it appears on the wire, e.g. ``Int`` or ``(Array Int Bool)``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    args: Tuple["SmtSort", ...] = ()

    def __str__(self):
        if not self.args:
            return self.name
        return f"({self.name} {' '.join(str(a) for a in self.args)})"

    def names(self) -> Set[str]:
        """
        Sort names mentioned anywhere in this sort.
        """
        found = set(_TOKEN.findall(self.name))
        for a in self.args:
            found |= a.names()
        return found


SmtSort.model_rebuild()

SINT = SmtSort(name="Int")
SBOOL = SmtSort(name="Bool")
SREAL = SmtSort(name="Real")
SSTRING = SmtSort(name="String")


def bitvec_sort(width: int) -> SmtSort:
    return SmtSort(name=f"(_ BitVec {width})")


def array_sort(index: SmtSort, elem: SmtSort) -> SmtSort:
    return SmtSort(name="Array", args=(index, elem))


def sort_var(i: int) -> SmtSort:
    """Type parameter ``i`` of a parametric datatype."""
    return SmtSort(name=f"T{i}")


class DataField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    sort: SmtSort


class DataCtor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    fields: Tuple[DataField, ...] = ()


class DataDecl(BaseModel):
    """
    A (possibly parametric) algebraic datatype.  Type parameters are
    referenced from field sorts with sort_var(i), i < arity.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arity: int = 0
    ctors: Tuple[DataCtor, ...] = ()

    def references(self) -> Set[str]:
        """
        Sort names used by the fields of this datatype.
        """
        refs = set()
        for c in self.ctors:
            for f in c.fields:
                refs |= f.sort.names()
        return refs


def _type_name(sort: PySMTType) -> str:
    return sort.as_smtlib(funstyle=False)


def sort_smt_sort(sort: PySMTType, env: Optional["SymEnv"] = None) -> SmtSort:
    """
    Convert a pysmt type to the sort used on the wire.

    Function-sorted values and uninterpreted sorts are encoded as ``Int``;
    custom types naming a datatype of ``env`` keep their name.

    Parameters
    ----------
    sort : PySMTType
        high level sort
    env : SymEnv, optional
        environment holding the datatype declarations

    Returns
    -------
    SmtSort
        wire level sort
    """
    if sort.is_bool_type():
        return SBOOL
    if sort.is_int_type():
        return SINT
    if sort.is_real_type():
        return SREAL
    if sort.is_string_type():
        return SSTRING
    if sort.is_bv_type():
        return bitvec_sort(sort.width)
    if sort.is_array_type():
        return array_sort(
            sort_smt_sort(sort.index_type, env),
            sort_smt_sort(sort.elem_type, env),
        )
    if sort.is_function_type():
        return SINT
    name = _type_name(sort)
    head = name.strip("()").split()[0] if name.strip("()") else name
    if env is not None and head in env.data:
        return SmtSort(name=name)
    return SINT


def decon_sort(sort: PySMTType) -> Tuple[List[PySMTType], PySMTType]:
    """
    Split a function sort into its argument sorts and result sort.
    """
    if sort.is_function_type():
        return list(sort.param_types), sort.return_type
    return [], sort
