"""
Solver specific options sent when a session starts, and the z3 version check
that gates string theory support.
"""
import logging
from typing import TYPE_CHECKING, List, Sequence

from .config import SMTSolver, SmtConfig
from .constants import MBQI_OFF, MIN_STRING_Z3_VERSION, Z3_OPTIONS
from .errors import SetupError

if TYPE_CHECKING:
    from .context import Context

l = logging.getLogger(__name__)


def smt_preamble(
    config: SmtConfig, solver: SMTSolver, ctx: "Context"
) -> List[str]:
    """
    Commands that set the solver up for ``config``.

    Raises
    ------
    SetupError
        the z3 version cannot be read, or string theory is requested from
        a solver that lacks it
    """
    if solver.is_z3():
        v = get_z3_version(ctx)
        check_valid_string_flag(solver, v, config)
        return (
            Z3_OPTIONS
            + make_mbqi(config)
            + make_timeout(config)
            + ctx.theory.preamble(config, solver)
        )
    check_valid_string_flag(solver, [], config)
    return ctx.theory.preamble(config, solver)


def get_z3_version(ctx: "Context") -> List[int]:
    # reply looks like (:version "4.8.15")
    resp = ctx.backend.send_and_await(b"(get-info :version)")
    return parse_version(resp.decode("utf-8", errors="replace"))


def parse_version(resp: str) -> List[int]:
    parts = resp.split('"')
    if len(parts) < 2:
        raise SetupError(f"Can't parse z3 (get-info :version): {resp!r}")
    components = parts[1].split(".")
    if not all(c.isdigit() for c in components):
        raise SetupError(f"Can't parse z3 version: {parts[1]!r}")
    version = [int(c) for c in components]
    l.debug(f"z3 version {version}")
    return version


def no_string(
    solver: SMTSolver, version: Sequence[int], config: SmtConfig
) -> bool:
    return config.string_theory and not (
        solver.is_z3() and tuple(version) >= MIN_STRING_Z3_VERSION
    )


def check_valid_string_flag(
    solver: SMTSolver, version: Sequence[int], config: SmtConfig
) -> None:
    if no_string(solver, version, config):
        raise SetupError(
            "stringTheory is only supported by z3 version >= "
            + ".".join(str(i) for i in MIN_STRING_Z3_VERSION)
        )


def make_timeout(config: SmtConfig) -> List[str]:
    if config.smt_timeout is not None:
        return [f"(set-option :timeout {config.smt_timeout})"]
    return []


def make_mbqi(config: SmtConfig) -> List[str]:
    if config.gradual:
        return []
    return [MBQI_OFF]
