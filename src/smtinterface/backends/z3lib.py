import logging
from collections import deque
from typing import Deque

from ..errors import SolverIOError
from .backend import Backend

l = logging.getLogger(__name__)


class EmbeddedLibrary(Backend):
    """
    z3 linked into this process through the z3-solver bindings.  Every
    command is evaluated immediately; output of commands sent without
    waiting is queued until recv() asks for it.
    """

    def __init__(self) -> None:
        try:
            import z3
        except ImportError as e:
            raise SolverIOError(
                "The z3mem solver needs the z3-solver package"
            ) from e
        self._z3 = z3
        self.context = z3.Context()
        self.pending: Deque[bytes] = deque()
        l.debug("Created new embedded z3 context ...")

    def _eval(self, data: bytes) -> str:
        if self.context is None:
            raise SolverIOError("Embedded z3 context is already closed")
        try:
            return self._z3.Z3_eval_smtlib2_string(
                self.context.ref(), data.decode("utf-8")
            )
        except self._z3.Z3Exception as e:
            raise SolverIOError(f"z3 failed on {data!r}: {e}") from e

    def send_no_reply(self, data: bytes) -> None:
        out = self._eval(data).strip()
        if out:
            self.pending.append(out.encode("utf-8"))

    def send_and_await(self, data: bytes) -> bytes:
        self.send_no_reply(data)
        return self.recv()

    def recv(self) -> bytes:
        if not self.pending:
            raise SolverIOError("No reply pending from embedded z3")
        return self.pending.popleft()

    def shutdown(self) -> int:
        self.context = None
        self.pending.clear()
        return 0
