"""
This module contains defintions of constants used within smtinterface
"""
from typing import Dict, List, Literal, Tuple

BUFFER_SIZE: int = 1024 * 1024 * 64
"""Block buffering for solver pipes and transcript files"""

SOLVER_ARGS: Dict[str, List[str]] = {
    "z3": ["z3", "-smt2", "-in"],
    "mathsat": ["mathsat", "-input=smt2"],
    "cvc4": ["cvc4", "--incremental", "-L", "smtlib2"],
}

MIN_STRING_Z3_VERSION: Tuple[int, ...] = (4, 4, 2)

Z3_OPTIONS: List[str] = [
    "(set-option :auto-config false)",
    "(set-option :model true)",
]

MBQI_OFF: str = "(set-option :smt.mbqi false)"
MBQI_ON: str = "(set-option :smt.mbqi true)"

APPLY_NAME = "apply"
COERCE_NAME = "coerce"
LAMBDA_NAME = "smt_lambda"
LAM_ARG_NAME = "lam_arg"
MAX_LAM_ARG: int = 7

LIT_PREFIX = "lit$"

SMT2_EXT = ".smt2"
SMT_SAYS = "; SMT Says: "

KIND_THEORY_DEFINITION: Literal[0] = 0
KIND_THEORY_DECLARATION: Literal[1] = 1
KIND_QUERY_BINDER: Literal[2] = 2
SymbolKind = Literal[0, 1, 2]
