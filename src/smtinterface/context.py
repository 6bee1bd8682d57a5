"""
This module defines Context, a session with one running SMT solver.

Commands that the solver does not answer are written without waiting.
``check-sat`` and ``get-value`` either wait for their reply (the synchronous
API) or are written "deferred", leaving the caller to collect replies later
with read_check_unsat(), in the order the commands were issued.  Replies are
kept in a backlog of newline separated records that is only refilled from
the solver once it runs dry.
"""
import copy
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from pysmt.fnode import FNode
from pysmt.typing import PySMTType

from .backends import Backend, spawn_backend
from .config import SmtConfig
from .constants import SMT2_EXT, SMT_SAYS
from .declare import declare_all, elaborate_sort
from .environment import SymEnv
from .errors import SmtCrashError, SmtError, SolverIOError
from .parser import parse_response
from .preamble import smt_preamble
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
    TriggeredExpr,
)
from .protocol.response import Ok, Response, Sat, Unknown, Unsat, Values
from .serialize import encode
from .sorts import DataDecl, SmtSort, decon_sort, sort_smt_sort
from .span import SrcSpan
from .theory import BasicTheoryCatalog, TheoryCatalog
from .utils.handles import close_quietly

l = logging.getLogger(__name__)

Elaborator = Callable[[str, SymEnv, PySMTType], PySMTType]


class ResponseBacklog(object):
    """
    Solver output not yet consumed by the parser, read one line at a time.
    """

    def __init__(self) -> None:
        self.buffer = bytearray()

    def __len__(self):
        return len(self.buffer)

    def empty(self) -> bool:
        return len(self.buffer) == 0

    def append(self, data: bytes) -> None:
        self.buffer += data
        if not self.buffer.strip():
            self.buffer.clear()

    def read_record(self) -> str:
        """
        Remove and return the first line (without its newline).  Whitespace
        in front of the next line is dropped with it.
        """
        i = self.buffer.find(b"\n")
        if i < 0:
            record, rest = bytes(self.buffer), b""
        else:
            record, rest = bytes(self.buffer[:i]), self.buffer[i + 1 :]
        self.buffer = bytearray(rest.lstrip())
        return record.decode("utf-8", errors="replace")


class _SessionState(object):
    # Shared by every Context bound to the same solver
    def __init__(self) -> None:
        self.depth = 0
        self.status: Optional[int] = None


class Context(object):
    """
    A session with one solver.  Not safe for concurrent use; independent
    Contexts share nothing and may run in parallel.

    Use as a context manager to guarantee cleanup():

        with make_context_no_log(config) as ctx:
            ...
    """

    def __init__(
        self,
        backend: Backend,
        config: Optional[SmtConfig] = None,
        log=None,
        env: Optional[SymEnv] = None,
        theory: Optional[TheoryCatalog] = None,
        elaborate: Optional[Elaborator] = None,
    ) -> None:
        self.backend = backend
        self.config = config if config is not None else SmtConfig()
        self.backlog = ResponseBacklog()
        self.log = log
        self.verbose = self.config.verbose
        self.env = env if env is not None else SymEnv()
        self.theory = theory if theory is not None else BasicTheoryCatalog()
        self.elaborate = elaborate if elaborate is not None else elaborate_sort
        self._state = _SessionState()

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.cleanup()

    @property
    def depth(self) -> int:
        """Number of scopes pushed and not yet popped."""
        return self._state.depth

    def with_env(self, env: SymEnv) -> "Context":
        """
        A context bound to ``env`` that talks to the same solver, backlog and
        transcript as this one.
        """
        ctx = copy.copy(self)
        ctx.env = env
        return ctx

    ###########################################################################
    # Solver I/O
    ###########################################################################

    def _log_line(self, text: str) -> None:
        if self.log is not None:
            self.log.write(text)
            self.log.write("\n")

    def write_raw(self, text: str) -> None:
        """
        Send ``text`` verbatim, expecting no reply.
        """
        l.debug(f"[send][raw] {text}")
        self._log_line(text)
        self.backend.send_no_reply(text.encode("utf-8"))

    def write(self, cmd: Command, deferred: bool = False) -> None:
        """
        Send ``cmd``.  Its reply, if it has one and the write is not
        deferred, is waited for and appended to the backlog.
        """
        text = encode(cmd, self.env)
        if not text:
            return
        await_reply = cmd.expects_response() and not deferred
        l.debug(f"[send]{' ' if await_reply else '[deferred] '}{text}")
        self._log_line(text)
        data = text.encode("utf-8")
        if await_reply:
            resp = self.backend.send_and_await(data).rstrip()
            self.backlog.append(resp + b"\n")
        else:
            self.backend.send_no_reply(data)

    def read_raw(self) -> str:
        """
        Next record of solver output, refilling the backlog from the solver
        when it is empty.
        """
        if self.backlog.empty():
            self.backlog.append(self.backend.recv().rstrip() + b"\n")
        return self.backlog.read_record()

    def read(self) -> Response:
        if self.verbose:
            l.info("SMT READ")
        res = parse_response(self.read_raw(), self.read_raw)
        self._log_line(f"{SMT_SAYS}{res}")
        if self.verbose:
            l.info(f"SMT Says: {res}")
        return res

    def command(self, cmd: Command) -> Response:
        """
        Send ``cmd`` and return the solver's answer, or Ok for commands the
        solver does not answer.
        """
        self.write(cmd)
        if cmd.expects_response():
            return self.read()
        return Ok()

    def interact(self, cmd: Command) -> None:
        self.command(cmd)

    ###########################################################################
    # Query API
    ###########################################################################

    def declare(self, x: str, t: PySMTType) -> None:
        ins, out = decon_sort(t)
        self.interact(
            Declare(
                name=x,
                args=[sort_smt_sort(s, self.env) for s in ins],
                result=sort_smt_sort(out, self.env),
            )
        )

    def declare_many(self, xts: Iterable[Tuple[str, PySMTType]]) -> None:
        for x, t in xts:
            self.declare(x, t)

    def declare_func(
        self, name: str, sig: Tuple[List[SmtSort], SmtSort]
    ) -> None:
        ts, t = sig
        self.interact(Declare(name=name, args=list(ts), result=t))

    def declare_data(self, decls: List[DataDecl]) -> None:
        self.interact(DeclareData(decls=list(decls)))

    def define_func(
        self,
        name: str,
        params: List[Tuple[str, PySMTType]],
        rsort: PySMTType,
        body: FNode,
    ) -> None:
        self.interact(
            DefineFunc(
                name=name,
                params=[(x, sort_smt_sort(t, self.env)) for x, t in params],
                result=sort_smt_sort(rsort, self.env),
                body=body,
            )
        )

    def assert_formula(self, p: FNode, label: Optional[str] = None) -> None:
        self.interact(Assert(body=p, label=label))

    def assert_axiom(self, t: Union[TriggeredExpr, FNode]) -> None:
        if isinstance(t, FNode):
            t = TriggeredExpr(body=t)
        self.interact(AssertAxiom(triggered=t))

    def distinct(self, terms: List[FNode]) -> None:
        self.interact(Distinct(terms=list(terms)))

    def push(self) -> None:
        self.interact(Push())
        self._state.depth += 1

    def pop(self) -> None:
        if self._state.depth == 0:
            raise SmtError("pop without a matching push")
        self.interact(Pop())
        self._state.depth -= 1

    def check_unsat(self) -> bool:
        """
        Check the current assertions.

        Returns
        -------
        bool
            True if unsat, False if sat or unknown

        Raises
        ------
        SmtCrashError
            the solver answered anything else
        """
        return resp_sat(self.command(CheckSat()))

    def check_unsat_assuming(self, p: FNode) -> bool:
        """
        check_unsat() with ``p`` asserted in a scope of its own.
        """
        with self.bracket("check_unsat_assuming"):
            self.assert_formula(p)
            return self.check_unsat()

    def check_sat(self, p: FNode) -> bool:
        """
        Assert ``p`` (in the current scope) and report whether the solver
        answers sat.  Used for gradual checks.
        """
        self.assert_formula(p)
        return isinstance(self.command(CheckSat()), Sat)

    def get_value(self, terms: List[FNode]) -> List[Tuple[str, str]]:
        """
        Values of ``terms`` in the current model, as printed by the solver.
        """
        r = self.command(GetValue(terms=list(terms)))
        if isinstance(r, Values):
            return r.pairs
        raise SmtCrashError(f"crash: SMTLIB2 get-value = {r}", r)

    @contextmanager
    def bracket(self, msg: str = ""):
        """
        Run the body of a with statement inside push()/pop().  The pop
        happens however the body exits.  When the body raises and the pop
        fails too, the pop failure is logged and the body's exception
        propagates.
        """
        self.push()
        try:
            yield self
        except BaseException:
            self._pop_after_failure(self.pop)
            raise
        else:
            self.pop()

    def _pop_after_failure(self, pop: Callable[[], None]) -> None:
        try:
            pop()
        except SmtError as e:
            l.warning(f"OOPS, pop breaks: {e}")

    @contextmanager
    def bracket_at(self, span: SrcSpan, msg: str = ""):
        """
        bracket() that reports failures as SmtCrashError located at ``span``.
        """
        with _die_at(span):
            with self.bracket(msg):
                yield self

    ###########################################################################
    # Deferred API
    ###########################################################################

    def push_deferred(self) -> None:
        self.write(Push(), deferred=True)
        self._state.depth += 1

    def pop_deferred(self) -> None:
        if self._state.depth == 0:
            raise SmtError("pop without a matching push")
        self.write(Pop(), deferred=True)
        self._state.depth -= 1

    def assert_deferred(self, p: FNode) -> None:
        self.write(Assert(body=p), deferred=True)

    def check_unsat_deferred(self) -> None:
        """
        Send check-sat without waiting; collect the answer with
        read_check_unsat().
        """
        self.write(CheckSat(), deferred=True)

    def read_check_unsat(self) -> bool:
        return resp_sat(self.read())

    @contextmanager
    def bracket_deferred(self, msg: str = ""):
        self.push_deferred()
        try:
            yield self
        except BaseException:
            self._pop_after_failure(self.pop_deferred)
            raise
        else:
            self.pop_deferred()

    @contextmanager
    def bracket_deferred_at(self, span: SrcSpan, msg: str = ""):
        with _die_at(span):
            with self.bracket_deferred(msg):
                yield self

    def exit(self) -> None:
        self.write(Exit(), deferred=True)

    def set_mbqi(self) -> None:
        self.write(SetMbqi(), deferred=True)

    ###########################################################################
    # Teardown
    ###########################################################################

    def cleanup(self) -> int:
        """
        Send (exit), close the transcript and wait for the solver to stop.
        Failures while releasing resources are logged, not raised.  Later
        calls return the first exit status.
        """
        if self._state.status is not None:
            return self._state.status
        try:
            self.exit()
        except SolverIOError as e:
            l.warning(f"OOPS, exit breaks: {e}")
        if self.log is not None:
            close_quietly("ctxLog", self.log)
        self._state.status = self.backend.shutdown()
        return self._state.status


def resp_sat(r: Response) -> bool:
    if isinstance(r, Unsat):
        return True
    if isinstance(r, (Sat, Unknown)):
        return False
    raise SmtCrashError(f"crash: SMTLIB2 respSat = {r}", r)


@contextmanager
def _die_at(span: SrcSpan):
    try:
        yield
    except SmtCrashError as e:
        if e.span is not None:
            raise
        raise SmtCrashError(str(e), e.response, span) from e
    except SmtError as e:
        raise SmtCrashError(str(e), span=span) from e


###############################################################################
# Creating and killing contexts
###############################################################################


def transcript_path(config: SmtConfig, target: Union[str, Path]) -> Path:
    target = Path(target)
    return target.parent / config.transcript_dir / f"{target.name}{SMT2_EXT}"


def _log_stderr(line: bytes) -> None:
    l.warning(
        f"OOPS, external process error: {line.decode('utf-8', errors='replace')}"
    )


def _make_context(
    config: SmtConfig, log, theory: Optional[TheoryCatalog]
) -> Context:
    backend = spawn_backend(
        config, stderr_sink=_log_stderr if log is not None else None
    )
    ctx = Context(backend, config=config, log=log, theory=theory)
    try:
        for text in smt_preamble(config, config.solver, ctx):
            ctx.write_raw(text)
    except BaseException:
        ctx.cleanup()
        raise
    return ctx


def make_context(
    config: SmtConfig,
    target: Union[str, Path],
    theory: Optional[TheoryCatalog] = None,
) -> Context:
    """
    Start a solver for ``config`` and send its preamble.  Every command is
    also written to a transcript next to ``target`` (see transcript_path).
    """
    smt_file = transcript_path(config, target)
    smt_file.parent.mkdir(parents=True, exist_ok=True)
    log = open(smt_file, "w", buffering=config.buffer_size)
    try:
        return _make_context(config, log, theory)
    except BaseException:
        close_quietly("ctxLog", log)
        raise


def make_context_no_log(
    config: SmtConfig, theory: Optional[TheoryCatalog] = None
) -> Context:
    return _make_context(config, None, theory)


def make_context_with_senv(
    config: SmtConfig,
    target: Union[str, Path],
    env: SymEnv,
    theory: Optional[TheoryCatalog] = None,
) -> Context:
    """
    make_context() bound to ``env``, with everything in ``env`` declared.
    """
    ctx = make_context(config, target, theory).with_env(env)
    try:
        declare_all(ctx)
    except BaseException:
        ctx.cleanup()
        raise
    return ctx


def cleanup_context(ctx: Context) -> int:
    """
    Close file handles and wait for the solver to terminate.
    """
    return ctx.cleanup()
