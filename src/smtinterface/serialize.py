"""
Render commands as SMTLIB2 text.
"""
import io
import logging
from typing import Callable, Dict, Optional, Type

from pysmt.fnode import FNode
from pysmt.smtlib.printers import SmtPrinter
from pysmt.utils import quote

from .constants import MBQI_ON
from .environment import SymEnv
from .errors import SerializationError
from .protocol.command import (
    Assert,
    AssertAxiom,
    CheckSat,
    Command,
    Declare,
    DeclareData,
    DefineFunc,
    Distinct,
    Exit,
    GetValue,
    Pop,
    Push,
    SetMbqi,
    SetOption,
    TriggeredExpr,
)
from .sorts import DataDecl, sort_smt_sort, sort_var

l = logging.getLogger(__name__)


class SessionSmtPrinter(SmtPrinter):
    """
    SmtPrinter that prints theory symbols under their solver names and real
    constants as exact ratios, e.g. ``(/ 1.0 3.0)``.
    """

    def __init__(self, stream, env: Optional[SymEnv] = None):
        super().__init__(stream)
        self.env = env if env is not None else SymEnv()

    def walk_symbol(self, formula):
        self.write(quote(self.env.smt_name(formula.symbol_name())))

    def walk_function(self, formula):
        name = formula.function_name().symbol_name()
        return self.walk_nary(formula, quote(self.env.smt_name(name)))

    def walk_real_constant(self, formula):
        value = formula.constant_value()
        (n, d) = (abs(value.numerator), value.denominator)
        # SMTLIB2 decimals have no exponent form, so keep the exact ratio
        if d != 1:
            res = f"(/ {n}.0 {d}.0)"
        else:
            res = f"{n}.0"
        if value < 0:
            res = f"(- {res})"

        self.write(res)


def expr_smt2(expr: FNode, env: Optional[SymEnv] = None) -> str:
    buf = io.StringIO()
    printer = SessionSmtPrinter(buf, env)
    printer.printer(expr)
    return buf.getvalue()


def _exprs(exprs, env) -> str:
    return " ".join(expr_smt2(e, env) for e in exprs)


def _sorts(sorts) -> str:
    return " ".join(str(s) for s in sorts)


def _data_decl_body(d: DataDecl) -> str:
    ctors = []
    for c in d.ctors:
        fields = "".join(f" ({quote(f.name)} {f.sort})" for f in c.fields)
        ctors.append(f"({quote(c.name)}{fields})")
    body = f"({' '.join(ctors)})"
    if d.arity == 0:
        return body
    params = " ".join(str(sort_var(i)) for i in range(d.arity))
    return f"(par ({params}) {body})"


def _triggered(t: TriggeredExpr, env: SymEnv) -> str:
    body = t.body
    if not t.patterns or not body.is_forall():
        return expr_smt2(body, env)
    binds = " ".join(
        f"({quote(v.symbol_name())} {sort_smt_sort(v.symbol_type(), env)})"
        for v in body.quantifier_vars()
    )
    return (
        f"(forall ({binds}) (! {expr_smt2(body.arg(0), env)}"
        f" :pattern ({_exprs(t.patterns, env)})))"
    )


def _push(cmd: Push, env: SymEnv) -> str:
    return "(push 1)"


def _pop(cmd: Pop, env: SymEnv) -> str:
    return "(pop 1)"


def _check_sat(cmd: CheckSat, env: SymEnv) -> str:
    return "(check-sat)"


def _get_value(cmd: GetValue, env: SymEnv) -> str:
    return f"(get-value ({_exprs(cmd.terms, env)}))"


def _declare(cmd: Declare, env: SymEnv) -> str:
    return f"(declare-fun {quote(cmd.name)} ({_sorts(cmd.args)}) {cmd.result})"


def _declare_data(cmd: DeclareData, env: SymEnv) -> str:
    heads = " ".join(f"({quote(d.name)} {d.arity})" for d in cmd.decls)
    bodies = " ".join(_data_decl_body(d) for d in cmd.decls)
    return f"(declare-datatypes ({heads}) ({bodies}))"


def _define_func(cmd: DefineFunc, env: SymEnv) -> str:
    params = " ".join(f"({quote(x)} {s})" for x, s in cmd.params)
    return (
        f"(define-fun {quote(cmd.name)} ({params}) {cmd.result}"
        f" {expr_smt2(cmd.body, env)})"
    )


def _assert(cmd: Assert, env: SymEnv) -> str:
    if cmd.label is None:
        return f"(assert {expr_smt2(cmd.body, env)})"
    return f"(assert (! {expr_smt2(cmd.body, env)} :named {quote(cmd.label)}))"


def _assert_axiom(cmd: AssertAxiom, env: SymEnv) -> str:
    return f"(assert {_triggered(cmd.triggered, env)})"


def _distinct(cmd: Distinct, env: SymEnv) -> str:
    if len(cmd.terms) < 2:
        return ""
    return f"(assert (distinct {_exprs(cmd.terms, env)}))"


def _set_option(cmd: SetOption, env: SymEnv) -> str:
    return f"(set-option :{cmd.key.lstrip(':')} {cmd.value})"


def _set_mbqi(cmd: SetMbqi, env: SymEnv) -> str:
    return MBQI_ON


def _exit(cmd: Exit, env: SymEnv) -> str:
    return "(exit)"


_ENCODERS: Dict[Type[Command], Callable[[Command, SymEnv], str]] = {
    Push: _push,
    Pop: _pop,
    CheckSat: _check_sat,
    GetValue: _get_value,
    Declare: _declare,
    DeclareData: _declare_data,
    DefineFunc: _define_func,
    Assert: _assert,
    AssertAxiom: _assert_axiom,
    Distinct: _distinct,
    SetOption: _set_option,
    SetMbqi: _set_mbqi,
    Exit: _exit,
}


def encode(cmd: Command, env: Optional[SymEnv] = None) -> str:
    """
    Render ``cmd`` as a single SMTLIB2 command.

    Parameters
    ----------
    cmd : Command
        command to render
    env : SymEnv, optional
        environment used to name theory symbols and datatype sorts

    Returns
    -------
    str
        the command text; empty for commands with nothing to say (a
        Distinct over fewer than two terms)

    Raises
    ------
    SerializationError
        cmd is not a known command
    """
    try:
        encoder = _ENCODERS[type(cmd)]
    except KeyError:
        raise SerializationError(
            f"Cannot encode {type(cmd).__name__} as SMTLIB2"
        )
    return encoder(cmd, env if env is not None else SymEnv())
