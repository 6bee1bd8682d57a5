"""
Validity checks built on the Context API.
"""
from pathlib import Path
from typing import List, Tuple, Union

from pysmt.fnode import FNode
from pysmt.shortcuts import And, Not
from pysmt.typing import PySMTType

from .config import SmtConfig
from .context import Context, make_context


def check_valid_unscoped(
    ctx: Context, xts: List[Tuple[str, PySMTType]], p: FNode, q: FNode
) -> bool:
    """
    Is ``p => q`` valid?  Declares ``xts`` and asserts in the current scope.
    """
    ctx.declare_many(xts)
    ctx.assert_formula(And(p, Not(q)))
    return ctx.check_unsat()


def check_valid_with_context(
    ctx: Context, xts: List[Tuple[str, PySMTType]], p: FNode, q: FNode
) -> bool:
    """
    check_valid_unscoped() in a scope of its own, for contexts where the
    variables already have declared types and many queries are made.
    """
    with ctx.bracket("check_valid_with_context"):
        return check_valid_unscoped(ctx, xts, p, q)


def check_valid(
    config: SmtConfig,
    target: Union[str, Path],
    xts: List[Tuple[str, PySMTType]],
    p: FNode,
    q: FNode,
) -> bool:
    with make_context(config, target) as ctx:
        return check_valid_unscoped(ctx, xts, p, q)


def check_valids(
    config: SmtConfig,
    target: Union[str, Path],
    xts: List[Tuple[str, PySMTType]],
    ps: List[FNode],
) -> List[bool]:
    """
    Validity of each of ``ps``, checked one at a time with one solver.
    """
    with make_context(config, target) as ctx:
        ctx.declare_many(xts)
        results = []
        for p in ps:
            with ctx.bracket("check_valids"):
                ctx.assert_formula(Not(p))
                results.append(ctx.check_unsat())
        return results
