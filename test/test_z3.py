import importlib.util
import shutil
import tempfile
import unittest
from fractions import Fraction
from pathlib import Path

from pysmt.shortcuts import (
    GT,
    LT,
    And,
    Equals,
    ForAll,
    Function,
    Int,
    Plus,
    Real,
    Symbol,
    Times,
    reset_env,
)
from pysmt.typing import INT, REAL, STRING, FunctionType

from smtinterface import (
    SMTSolver,
    SmtConfig,
    SymEnv,
    TriggeredExpr,
    make_context_no_log,
    make_context_with_senv,
)

HAS_Z3_BINARY = shutil.which("z3") is not None
HAS_Z3_MODULE = importlib.util.find_spec("z3") is not None


class Z3Scenario(object):
    """Queries run against each way of running z3."""

    config: SmtConfig

    def setUp(self):
        reset_env()
        self.x = Symbol("x", INT)
        self.y = Symbol("y", INT)

    def test_scoped_queries(self):
        with make_context_no_log(self.config) as ctx:
            ctx.declare_many([("x", INT), ("y", INT)])
            ctx.assert_formula(GT(self.x, Int(0)))
            with ctx.bracket():
                ctx.assert_formula(LT(self.x, Int(0)))
                assert ctx.check_unsat()
            assert not ctx.check_unsat()
            assert ctx.check_unsat_assuming(Equals(self.x, Int(0)))
            assert ctx.depth == 0

    def test_get_value(self):
        with make_context_no_log(self.config) as ctx:
            ctx.declare_many([("x", INT), ("y", INT)])
            ctx.assert_formula(
                And(Equals(self.x, Int(-3)), Equals(self.y, Plus(self.x, Int(1))))
            )
            assert not ctx.check_unsat()
            assert ctx.get_value([self.x, self.y]) == [
                ("x", "(- 3)"),
                ("y", "(- 2)"),
            ]

    def test_deferred(self):
        with make_context_no_log(self.config) as ctx:
            ctx.declare("x", INT)
            for bound in [0, 5, -5]:
                with ctx.bracket_deferred():
                    ctx.assert_deferred(
                        And(GT(self.x, Int(bound)), LT(self.x, Int(1)))
                    )
                    ctx.check_unsat_deferred()
            assert [ctx.read_check_unsat() for _ in range(3)] == [
                True,
                True,
                False,
            ]

    def test_exact_rationals(self):
        r = Symbol("r", REAL)
        with make_context_no_log(self.config) as ctx:
            ctx.declare("r", REAL)
            ctx.assert_formula(Equals(r, Real(Fraction(1, 3))))
            ctx.assert_formula(Equals(Times(r, Real(3)), Real(1)))
            assert not ctx.check_unsat()
            assert ctx.check_unsat_assuming(
                Equals(r, Real(Fraction(-7, 10**9)))
            )

    def test_axiom_with_pattern(self):
        f = Symbol("f", FunctionType(INT, [INT]))
        with make_context_no_log(self.config) as ctx:
            ctx.declare("f", f.symbol_type())
            ctx.declare("x", INT)
            a = Symbol("a", INT)
            fa = Function(f, [a])
            ctx.assert_axiom(
                TriggeredExpr(
                    body=ForAll([a], Equals(fa, Plus(a, Int(1)))),
                    patterns=[fa],
                )
            )
            ctx.assert_formula(
                Equals(Function(f, [self.x]), self.x)
            )
            assert ctx.check_unsat()

    def test_string_literals(self):
        env = SymEnv(
            sorts={"lit$ab": STRING, "lit$cd": STRING},
            lits={"lit$ab": STRING, "lit$cd": STRING},
        )
        config = self.config.model_copy(update={"string_theory": True})
        with tempfile.TemporaryDirectory() as tmp:
            with make_context_with_senv(
                config, Path(tmp) / "strings.fq", env
            ) as ctx:
                ab = Symbol("lit$ab", STRING)
                cd = Symbol("lit$cd", STRING)
                assert ctx.check_unsat_assuming(Equals(ab, cd))
                assert not ctx.check_unsat()


@unittest.skipUnless(HAS_Z3_BINARY, "z3 executable not found")
class TestZ3Process(Z3Scenario, unittest.TestCase):
    config = SmtConfig(solver=SMTSolver.Z3)


@unittest.skipUnless(HAS_Z3_MODULE, "z3-solver not installed")
class TestZ3Embedded(Z3Scenario, unittest.TestCase):
    @property
    def config(self):
        return SmtConfig(solver=SMTSolver.Z3MEM)


if __name__ == "__main__":
    unittest.main()
