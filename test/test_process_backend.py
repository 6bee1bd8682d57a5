import logging
import os
import sys
import tempfile
import unittest
from pathlib import Path

from pysmt.shortcuts import FALSE, Equals, Int, Symbol, reset_env
from pysmt.typing import INT

from smtinterface.backends import ChildProcess
from smtinterface.config import SmtConfig
from smtinterface.context import make_context, make_context_no_log
from smtinterface.errors import SetupError, SolverIOError

RESOURCES = Path(
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "../resources")
)
FAKE_SOLVER = RESOURCES / "solvers" / "fake_smt_solver.py"


def fake_config(version="4.8.15", **kwargs) -> SmtConfig:
    return SmtConfig(
        solver_command=[sys.executable, str(FAKE_SOLVER), version], **kwargs
    )


class TestChildProcess(unittest.TestCase):
    def test_reply_over_several_lines(self):
        backend = ChildProcess([sys.executable, str(FAKE_SOLVER)])
        try:
            reply = backend.send_and_await(b"(get-value (a b c))")
            assert reply == b"((a 0)\n (b (- 1))\n (c 2))"
        finally:
            backend.send_no_reply(b"(exit)")
            assert backend.shutdown() == 0

    def test_end_of_output(self):
        backend = ChildProcess([sys.executable, str(FAKE_SOLVER)])
        backend.send_no_reply(b"(exit)")
        with self.assertRaises(SolverIOError):
            backend.recv()
        assert backend.shutdown() == 0

    def test_missing_solver(self):
        with self.assertRaises(SolverIOError):
            ChildProcess(["/nonexistent/bin/z3", "-in"])


class TestProcessContext(unittest.TestCase):
    def setUp(self):
        reset_env()
        self.x = Symbol("x", INT)
        self.y = Symbol("y", INT)

    def test_check_unsat(self):
        with make_context_no_log(fake_config()) as ctx:
            ctx.declare_many([("x", INT), ("y", INT)])
            with ctx.bracket():
                ctx.assert_formula(FALSE())
                assert ctx.check_unsat()
            assert not ctx.check_unsat()
            assert ctx.get_value([self.x, self.y]) == [
                ("x", "0"),
                ("y", "(- 1)"),
            ]
        assert ctx.cleanup() == 0

    def test_deferred(self):
        with make_context_no_log(fake_config()) as ctx:
            for p in [FALSE(), Equals(self.x, Int(1)), FALSE()]:
                with ctx.bracket_deferred():
                    ctx.assert_deferred(p)
                    ctx.check_unsat_deferred()
            assert [ctx.read_check_unsat() for _ in range(3)] == [
                True,
                False,
                True,
            ]

    def test_old_z3_rejects_string_theory(self):
        with self.assertRaises(SetupError):
            make_context_no_log(fake_config("4.2.0", string_theory=True))
        ctx = make_context_no_log(fake_config("4.4.2", string_theory=True))
        assert ctx.cleanup() == 0

    def test_transcript(self):
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "query.fq"
            with make_context(fake_config(smt_timeout=10), target) as ctx:
                ctx.assert_formula(FALSE())
                assert ctx.check_unsat()
            text = (Path(tmp) / ".smt" / "query.fq.smt2").read_text()
        assert text.splitlines()[-4:] == [
            "(assert false)",
            "(check-sat)",
            "; SMT Says: Unsat",
            "(exit)",
        ]
        assert "(set-option :timeout 10)" in text

    def test_crash(self):
        with tempfile.TemporaryDirectory() as tmp:
            ctx = make_context(fake_config(), Path(tmp) / "query.fq")
            with self.assertLogs("smtinterface.context", logging.WARNING) as cm:
                ctx.write_raw("(set-option :fake-crash true)")
                with self.assertRaises(SolverIOError):
                    ctx.check_unsat()
                assert ctx.cleanup() == 3
        assert any("crashing on request" in o for o in cm.output)


if __name__ == "__main__":
    unittest.main()
