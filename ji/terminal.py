"""Terminal control helpers for the editor session.

Owns the raw-mode lifecycle and checked writes to the output descriptor.
Failures here are fatal: callers cannot keep drawing on a terminal whose
mode or size is unknown.
"""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import termios

from . import ansi

logger = logging.getLogger(__name__)

# Indexes into the list returned by ``termios.tcgetattr``.
IFLAG, OFLAG, CFLAG, LFLAG, ISPEED, OSPEED, CC = range(7)


class TerminalError(Exception):
    """Unrecoverable terminal-control failure.

    ``operation`` names the failing call (``tcgetattr``, ``read``...) and the
    message mirrors ``perror`` output: ``"<operation>: <system error>"``.
    """

    def __init__(self, operation: str, cause: BaseException | str | None = None) -> None:
        self.operation = operation
        self.cause = cause
        if isinstance(cause, OSError) and cause.strerror:
            detail = cause.strerror
        elif cause is not None:
            detail = str(cause)
        else:
            detail = "failed"
        super().__init__(f"{operation}: {detail}")


def make_raw_attributes(saved: list) -> list:
    """Return a raw-mode copy of ``saved`` without mutating it.

    Reads return after at most one decisecond even when no byte arrived.
    """
    raw = list(saved)
    raw[CC] = list(saved[CC])
    raw[IFLAG] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[OFLAG] &= ~termios.OPOST
    raw[CFLAG] |= termios.CS8
    raw[LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    raw[CC][termios.VMIN] = 0
    raw[CC][termios.VTIME] = 1
    return raw


class TerminalController:
    """Manage terminal mode transitions for one pair of descriptors."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Bind stdin/stdout file descriptors; the tty state is captured on entry."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state: list | None = None
        self._raw_enabled = False

    @property
    def raw_enabled(self) -> bool:
        return self._raw_enabled

    def enter_raw_mode(self) -> None:
        """Capture current attributes and switch the terminal to raw mode."""
        if self._raw_enabled:
            return
        try:
            self._saved_tty_state = termios.tcgetattr(self.stdin_fd)
        except (OSError, termios.error) as exc:
            raise TerminalError("tcgetattr", _as_os_error(exc)) from exc
        atexit.register(self.restore_mode)
        raw = make_raw_attributes(self._saved_tty_state)
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw)
        except (OSError, termios.error) as exc:
            atexit.unregister(self.restore_mode)
            raise TerminalError("tcsetattr", _as_os_error(exc)) from exc
        self._raw_enabled = True
        logger.debug("raw mode enabled on fd %d", self.stdin_fd)

    def restore_mode(self) -> None:
        """Reapply the attributes captured by ``enter_raw_mode``."""
        if not self._raw_enabled or self._saved_tty_state is None:
            return
        self._raw_enabled = False
        atexit.unregister(self.restore_mode)
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except (OSError, termios.error) as exc:
            raise TerminalError("tcsetattr", _as_os_error(exc)) from exc
        logger.debug("terminal mode restored on fd %d", self.stdin_fd)

    def write(self, data: bytes) -> None:
        """Write ``data`` in one call; a short write is a fatal error."""
        try:
            written = os.write(self.stdout_fd, data)
        except OSError as exc:
            raise TerminalError("write", exc) from exc
        if written != len(data):
            raise TerminalError("write", f"short write ({written} of {len(data)} bytes)")

    def clear_screen(self) -> None:
        """Clear the screen and home the cursor, ignoring write errors."""
        with contextlib.suppress(OSError):
            os.write(self.stdout_fd, (ansi.CLEAR_SCREEN + ansi.CURSOR_HOME).encode("ascii"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with raw enter/restore calls."""
        self.enter_raw_mode()
        try:
            yield self
        finally:
            self.restore_mode()


def _as_os_error(exc: BaseException) -> BaseException:
    # termios.error carries (errno, strerror) args rather than OSError fields.
    if isinstance(exc, termios.error) and len(exc.args) == 2:
        return OSError(*exc.args)
    return exc
