import unittest
from fractions import Fraction

from pysmt.shortcuts import (
    FALSE,
    TRUE,
    And,
    Equals,
    ForAll,
    Function,
    Int,
    Plus,
    Real,
    String,
    Symbol,
    reset_env,
)
from pysmt.typing import INT, REAL, STRING, FunctionType

from smtinterface.environment import SymEnv, TheoryKind, TheorySymbol
from smtinterface.errors import SerializationError
from smtinterface.protocol import (
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
from smtinterface.serialize import encode, expr_smt2
from smtinterface.sorts import (
    SBOOL,
    SINT,
    DataCtor,
    DataDecl,
    DataField,
    SmtSort,
    array_sort,
    sort_var,
)


class TestEncode(unittest.TestCase):
    def setUp(self):
        reset_env()
        self.x = Symbol("x", INT)
        self.y = Symbol("y", INT)

    def test_simple_commands(self):
        assert encode(Push()) == "(push 1)"
        assert encode(Pop()) == "(pop 1)"
        assert encode(CheckSat()) == "(check-sat)"
        assert encode(Exit()) == "(exit)"
        assert encode(SetMbqi()) == "(set-option :smt.mbqi true)"

    def test_set_option(self):
        assert (
            encode(SetOption(key="timeout", value="100"))
            == "(set-option :timeout 100)"
        )
        assert (
            encode(SetOption(key=":produce-models", value="true"))
            == "(set-option :produce-models true)"
        )

    def test_declare(self):
        assert (
            encode(Declare(name="x", result=SINT)) == "(declare-fun x () Int)"
        )
        assert (
            encode(Declare(name="f", args=[SINT, SBOOL], result=SINT))
            == "(declare-fun f (Int Bool) Int)"
        )
        assert (
            encode(
                Declare(name="m", result=array_sort(SINT, SBOOL))
            )
            == "(declare-fun m () (Array Int Bool))"
        )

    def test_declare_quotes_names(self):
        assert (
            encode(Declare(name="a b", result=SINT))
            == "(declare-fun |a b| () Int)"
        )

    def test_assert(self):
        p = Equals(self.x, Int(1))
        assert encode(Assert(body=p)) == "(assert (= x 1))"
        assert (
            encode(Assert(body=p, label="a1"))
            == "(assert (! (= x 1) :named a1))"
        )
        assert encode(Assert(body=TRUE())) == "(assert true)"
        assert encode(Assert(body=FALSE())) == "(assert false)"

    def test_negative_int(self):
        assert expr_smt2(Int(-5)) == "(- 5)"

    def test_real_constants(self):
        r = Symbol("r", REAL)
        assert (
            encode(Assert(body=Equals(r, Real(5))))
            == "(assert (= r 5.0))"
        )
        cases = [
            (Real(-5), "(- 5.0)"),
            (Real(Fraction(1, 3)), "(/ 1.0 3.0)"),
            (Real(Fraction(1, 10**20)), "(/ 1.0 100000000000000000000.0)"),
            (Real(Fraction(-7, 10**9)), "(- (/ 7.0 1000000000.0))"),
        ]
        for c, text in cases:
            out = expr_smt2(c)
            assert out == text
            assert "e" not in out

    def test_string_literal_quoting(self):
        s = Symbol("s", STRING)
        text = encode(Assert(body=Equals(s, String('say "hi"'))))
        assert '"say ""hi"""' in text, text

    def test_define_func(self):
        a = Symbol("a", INT)
        cmd = DefineFunc(
            name="inc",
            params=[("a", SINT)],
            result=SINT,
            body=Plus(a, Int(1)),
        )
        assert encode(cmd) == "(define-fun inc ((a Int)) Int (+ a 1))"

    def test_get_value(self):
        assert encode(GetValue(terms=[self.x, self.y])) == "(get-value (x y))"

    def test_distinct(self):
        assert (
            encode(Distinct(terms=[self.x, self.y, Int(3)]))
            == "(assert (distinct x y 3))"
        )
        assert encode(Distinct(terms=[self.x])) == ""
        assert encode(Distinct(terms=[])) == ""

    def test_declare_data(self):
        pair = DataDecl(
            name="Pair",
            ctors=[
                DataCtor(
                    name="mk_pair",
                    fields=[
                        DataField(name="fst", sort=SINT),
                        DataField(name="snd", sort=SBOOL),
                    ],
                )
            ],
        )
        assert encode(DeclareData(decls=[pair])) == (
            "(declare-datatypes ((Pair 0)) "
            "(((mk_pair (fst Int) (snd Bool)))))"
        )

    def test_declare_parametric_data(self):
        lst = DataDecl(
            name="List",
            arity=1,
            ctors=[
                DataCtor(name="nil"),
                DataCtor(
                    name="cons",
                    fields=[
                        DataField(name="head", sort=sort_var(0)),
                        DataField(
                            name="tail",
                            sort=SmtSort(name="List", args=(sort_var(0),)),
                        ),
                    ],
                ),
            ],
        )
        assert encode(DeclareData(decls=[lst])) == (
            "(declare-datatypes ((List 1)) "
            "((par (T0) ((nil) (cons (head T0) (tail (List T0)))))))"
        )

    def test_axiom_with_pattern(self):
        f = Symbol("f", FunctionType(INT, [INT]))
        fx = Function(f, [self.x])
        body = ForAll([self.x], Equals(fx, self.x))
        text = encode(
            AssertAxiom(triggered=TriggeredExpr(body=body, patterns=[fx]))
        )
        assert text == (
            "(assert (forall ((x Int)) (! (= (f x) x) :pattern ((f x)))))"
        )

    def test_axiom_without_pattern(self):
        p = And(Equals(self.x, Int(1)), Equals(self.y, Int(2)))
        text = encode(AssertAxiom(triggered=TriggeredExpr(body=p)))
        assert text == "(assert (and (= x 1) (= y 2)))"

    def test_theory_symbols_use_solver_names(self):
        f = Symbol("Set_cup", FunctionType(INT, [INT, INT]))
        env = SymEnv(
            theory={
                "Set_cup": TheorySymbol(
                    name="Set_cup",
                    sort=f.symbol_type(),
                    interp=TheoryKind.THEORY,
                    smt_name="union",
                )
            }
        )
        text = encode(
            Assert(body=Equals(Function(f, [self.x, self.y]), self.x)), env
        )
        assert text == "(assert (= (union x y) x))"

    def test_unknown_command(self):
        class Frobnicate(Command):
            pass

        with self.assertRaises(SerializationError):
            encode(Frobnicate())


if __name__ == "__main__":
    unittest.main()
