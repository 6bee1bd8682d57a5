"""
The Backend interface shared by every way of running a solver.
"""
from abc import ABC, abstractmethod


class Backend(ABC):
    """
    A running solver that accepts SMTLIB2 commands as bytes.  Implementations
    own the solver (process or library handle) until shutdown().
    """

    @abstractmethod
    def send_and_await(self, data: bytes) -> bytes:
        """
        Send one command and return the next reply record.

        Parameters
        ----------
        data : bytes
            encoded command, without trailing newline

        Returns
        -------
        bytes
            the reply, stripped of trailing whitespace
        """
        pass

    @abstractmethod
    def send_no_reply(self, data: bytes) -> None:
        """
        Send one command without reading anything back.
        """
        pass

    @abstractmethod
    def recv(self) -> bytes:
        """
        Read the next reply record still pending from earlier commands.
        """
        pass

    @abstractmethod
    def shutdown(self) -> int:
        """
        Release the solver and return its exit status.
        """
        pass
