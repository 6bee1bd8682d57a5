import logging
import subprocess
import threading
from typing import Callable, List, Optional

from ..constants import BUFFER_SIZE
from ..errors import SolverIOError
from ..utils.handles import close_quietly
from ..utils.sexp import is_complete
from .backend import Backend

l = logging.getLogger(__name__)

StderrSink = Callable[[bytes], None]


class ChildProcess(Backend):
    """
    A solver running as a child process, spoken to over block buffered
    stdin/stdout pipes.  Anything the solver prints on stderr is handed to
    ``stderr_sink`` line by line, or discarded when there is no sink.
    """

    def __init__(
        self,
        args: List[str],
        buffer_size: int = BUFFER_SIZE,
        stderr_sink: Optional[StderrSink] = None,
    ) -> None:
        self.args = args
        try:
            self.process = subprocess.Popen(
                args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=(
                    subprocess.PIPE
                    if stderr_sink is not None
                    else subprocess.DEVNULL
                ),
                bufsize=buffer_size,
            )
        except OSError as e:
            raise SolverIOError(f"Could not start solver {args}: {e}") from e
        l.debug(f"Started solver {args} (pid {self.process.pid})")

        self._stderr_thread = None
        if stderr_sink is not None:
            self._stderr_thread = threading.Thread(
                target=self._drain_stderr,
                args=(stderr_sink,),
                name=f"{args[0]}-stderr",
                daemon=True,
            )
            self._stderr_thread.start()

    def _drain_stderr(self, sink: StderrSink) -> None:
        for line in iter(self.process.stderr.readline, b""):
            sink(line.rstrip())

    def send_no_reply(self, data: bytes) -> None:
        try:
            self.process.stdin.write(data)
            self.process.stdin.write(b"\n")
            self.process.stdin.flush()
        except (OSError, ValueError) as e:
            raise SolverIOError(
                f"Could not write to solver {self.args[0]}: {data!r}: {e}"
            ) from e

    def send_and_await(self, data: bytes) -> bytes:
        self.send_no_reply(data)
        return self.recv()

    def _read_line(self) -> bytes:
        try:
            line = self.process.stdout.readline()
        except (OSError, ValueError) as e:
            raise SolverIOError(
                f"Could not read from solver {self.args[0]}: {e}"
            ) from e
        if not line:
            raise SolverIOError(
                f"Solver {self.args[0]} terminated unexpectedly"
                f" (exit status {self.process.poll()})"
            )
        return line

    def recv(self) -> bytes:
        """
        Read lines until they hold one complete s-expression (or atom),
        skipping blank lines in front of it.
        """
        lines = []
        while True:
            line = self._read_line()
            if not lines and not line.strip():
                continue
            lines.append(line)
            reply = b"".join(lines)
            if is_complete(reply.decode("utf-8", errors="replace")):
                return reply.rstrip()

    def shutdown(self) -> int:
        close_quietly("stdin", self.process.stdin)
        close_quietly("stdout", self.process.stdout)
        status = self.process.wait()
        if self._stderr_thread is not None:
            self._stderr_thread.join()
            close_quietly("stderr", self.process.stderr)
        l.debug(f"Solver {self.args[0]} exited with status {status}")
        return status
