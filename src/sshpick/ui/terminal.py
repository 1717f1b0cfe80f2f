"""ANSI terminal control used by the selector."""

import os
import re
import select
import sys
import termios
import time
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from rich.console import Console
from rich.control import Control, ControlType

from sshpick.errors import UnsupportedTerminalError

DEFAULT_QUERY_TIMEOUT = 1.0
MAX_REPLY_LEN = 32

_CURSOR_REPLY = re.compile(r"\x1b\[(\d+);(\d+)R$")


def parse_cursor_reply(reply: str) -> int:
    """Extract the 1-based row from an `ESC[row;colR` report."""
    match = _CURSOR_REPLY.search(reply)
    if not match:
        raise UnsupportedTerminalError(f"unexpected cursor position reply: {reply!r}")
    return int(match.group(1))


class Terminal:
    """Thin wrapper over a Rich console plus the tty behind stdin.

    Rows are 1-based, as in ANSI cursor addressing.
    """

    def __init__(
        self,
        console: Console | None = None,
        stdin: TextIO | None = None,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        self.console = console or Console(highlight=False)
        self._stdin = stdin or sys.stdin
        self.query_timeout = query_timeout

    def check_supported(self) -> None:
        """Raise UnsupportedTerminalError unless both ends are an ANSI tty."""
        if not self.console.is_terminal or self.console.is_dumb_terminal:
            raise UnsupportedTerminalError("output is not an ANSI terminal")
        if not self._stdin.isatty():
            raise UnsupportedTerminalError("input is not a terminal")

    @property
    def _fd(self) -> int:
        return self._stdin.fileno()

    def cursor_row(self) -> int:
        """Ask the terminal where the cursor is and return its row."""
        try:
            fd = self._fd
            saved = termios.tcgetattr(fd)
        except (termios.error, OSError) as e:
            raise UnsupportedTerminalError(f"cannot read terminal attributes: {e}") from e

        reply = ""
        try:
            tty.setcbreak(fd, termios.TCSANOW)
            self._write_raw("\x1b[6n")
            deadline = time.monotonic() + self.query_timeout
            while not reply.endswith("R"):
                remaining = deadline - time.monotonic()
                if remaining <= 0 or len(reply) > MAX_REPLY_LEN:
                    raise UnsupportedTerminalError("terminal did not report the cursor position")
                ready, _, _ = select.select([fd], [], [], remaining)
                if not ready:
                    continue
                reply += os.read(fd, 1).decode(errors="replace")
        finally:
            termios.tcsetattr(fd, termios.TCSANOW, saved)
        return parse_cursor_reply(reply)

    @contextmanager
    def session(self) -> Iterator["Terminal"]:
        """Hide the cursor and stop echo until the block exits, however it exits."""
        try:
            fd = self._fd
            saved = termios.tcgetattr(fd)
        except (termios.error, OSError) as e:
            raise UnsupportedTerminalError(f"cannot read terminal attributes: {e}") from e

        attrs = termios.tcgetattr(fd)
        attrs[3] &= ~termios.ECHO
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
        self.hide_cursor()
        try:
            yield self
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
            self.show_cursor()

    def hide_cursor(self) -> None:
        self.console.control(Control.show_cursor(False))

    def show_cursor(self) -> None:
        self.console.control(Control.show_cursor(True))

    def move_to(self, row: int, column: int = 1) -> None:
        # Control.move_to is 0-based
        self.console.control(Control.move_to(column - 1, row - 1))

    def clear_line(self) -> None:
        self.console.control(Control((ControlType.ERASE_IN_LINE, 2)))

    def write(self, markup: str) -> None:
        """Print Rich markup at the cursor without a trailing newline."""
        self.console.print(markup, end="", soft_wrap=True, highlight=False)

    def newline(self, count: int = 1) -> None:
        self.console.file.write("\n" * count)
        self.console.file.flush()

    def _write_raw(self, data: str) -> None:
        self.console.file.write(data)
        self.console.file.flush()
