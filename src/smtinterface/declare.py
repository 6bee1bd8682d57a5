"""
Declare everything a SymEnv mentions, in an order the solver accepts:

1. datatypes, each after the datatypes it refers to
2. uninterpreted theory symbols
3. symbols bound by the query (elaborated first)
4. first-order helpers for higher-order application
5. distinctness of literal constants, by sort
6. axioms about literal constants
"""
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from pysmt.fnode import FNode
from pysmt.shortcuts import FunctionType, Symbol
from pysmt.typing import PySMTType

from .constants import (
    APPLY_NAME,
    COERCE_NAME,
    KIND_QUERY_BINDER,
    KIND_THEORY_DECLARATION,
    KIND_THEORY_DEFINITION,
    LAM_ARG_NAME,
    LAMBDA_NAME,
    MAX_LAM_ARG,
    SymbolKind,
)
from .environment import SymEnv
from .sorts import SINT, DataDecl, SmtSort
from .theory import TheoryCatalog

if TYPE_CHECKING:
    from .context import Context

l = logging.getLogger(__name__)


def declare_all(ctx: "Context") -> None:
    env = ctx.env
    xts = symbol_sorts(env)
    thy_xts = [
        (x, t)
        for x, t in xts
        if sym_kind(ctx.theory, env, x) == KIND_THEORY_DECLARATION
    ]
    qry_xts = [
        (x, ctx.elaborate("declare", env, t))
        for x, t in xts
        if sym_kind(ctx.theory, env, x) == KIND_QUERY_BINDER
    ]
    lits = list(env.lits.items())

    for ds in data_declarations(env):
        ctx.declare_data(ds)
    for x, t in thy_xts:
        ctx.declare(x, t)
    for x, t in qry_xts:
        ctx.declare(x, t)
    for name, sig in func_sort_vars(env):
        ctx.declare_func(name, sig)
    for es in distinct_literals(lits):
        ctx.distinct(es)
    for ax in ctx.theory.axiom_literals(lits):
        ctx.assert_formula(ax)
    l.debug(
        f"Declared {len(thy_xts)} theory and {len(qry_xts)} query symbols"
    )


def _object_sort(env: SymEnv, t: PySMTType) -> Optional[PySMTType]:
    if t.is_custom_type():
        return env.sorts.get(t.as_smtlib(funstyle=False))
    return None


def symbol_sorts(env: SymEnv) -> List[Tuple[str, PySMTType]]:
    """
    Sorts of every symbol in ``env``, with object sorts named after another
    symbol replaced by that symbol's sort.
    """
    return [(x, _object_sort(env, t) or t) for x, t in env.sorts.items()]


def elaborate_sort(label: str, env: SymEnv, t: PySMTType) -> PySMTType:
    """
    Resolve object sorts in ``t`` against ``env``, including inside function
    sorts.
    """
    if t.is_function_type():
        return FunctionType(
            elaborate_sort(label, env, t.return_type),
            [elaborate_sort(label, env, s) for s in t.param_types],
        )
    resolved = _object_sort(env, t)
    if resolved is not None and resolved != t:
        return elaborate_sort(label, env, resolved)
    return t


def sym_kind(theory: TheoryCatalog, env: SymEnv, x: str) -> SymbolKind:
    """
    0 for theory definitions (never declared), 1 for theory declarations
    and 2 for symbols bound by the query.
    """
    kind = theory.interp(env, x)
    if kind is None:
        return KIND_QUERY_BINDER
    if kind.interpreted():
        return KIND_THEORY_DEFINITION
    return KIND_THEORY_DECLARATION


def data_declarations(env: SymEnv) -> List[List[DataDecl]]:
    return order_declarations(list(env.data.values()))


def order_declarations(decls: List[DataDecl]) -> List[List[DataDecl]]:
    """
    Group mutually recursive datatypes together and order the groups so that
    every datatype comes after the ones it refers to.
    """
    by_name = {d.name: d for d in decls}
    index: Dict[str, int] = {}
    low: Dict[str, int] = {}
    stack: List[str] = []
    on_stack = set()
    groups: List[List[DataDecl]] = []

    def connect(name: str) -> None:
        index[name] = low[name] = len(index)
        stack.append(name)
        on_stack.add(name)
        for ref in sorted(by_name[name].references()):
            if ref not in by_name:
                continue
            if ref not in index:
                connect(ref)
                low[name] = min(low[name], low[ref])
            elif ref in on_stack:
                low[name] = min(low[name], index[ref])
        if low[name] == index[name]:
            group = []
            while True:
                member = stack.pop()
                on_stack.discard(member)
                group.append(by_name[member])
                if member == name:
                    break
            groups.append(list(reversed(group)))

    for d in decls:
        if d.name not in index:
            connect(d.name)
    return groups


def func_sort_vars(
    env: SymEnv,
) -> List[Tuple[str, Tuple[List[SmtSort], SmtSort]]]:
    """
    Declarations of the first-order functions standing for application,
    coercion, lambda and lambda arguments at each registered sort pair.
    """
    ts = list(env.appls.keys())
    return (
        [(env.helper_name(APPLY_NAME, t), ([SINT, t[0]], t[1])) for t in ts]
        + [(env.helper_name(COERCE_NAME, t), ([t[0]], t[1])) for t in ts]
        + [(env.helper_name(LAMBDA_NAME, t), ([t[0], t[1]], SINT)) for t in ts]
        + [
            (env.helper_name(f"{LAM_ARG_NAME}${i}", t), ([], t[0]))
            for t in ts
            if t[1] == SINT
            for i in range(1, MAX_LAM_ARG + 1)
        ]
    )


def distinct_literals(lits: List[Tuple[str, PySMTType]]) -> List[List[FNode]]:
    """
    Literal constants grouped by sort.  Literals of function sort are left
    out.
    """
    groups: Dict[PySMTType, List[FNode]] = {}
    for x, t in lits:
        if t.is_function_type():
            continue
        groups.setdefault(t, []).append(Symbol(x, t))
    return list(groups.values())
