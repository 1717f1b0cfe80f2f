"""Pytest fixtures for sshpick tests."""

from contextlib import contextmanager

import pytest


@pytest.fixture(autouse=True)
def clear_caches(monkeypatch, tmp_path):
    """Clear the config cache and isolate the config directory."""
    from sshpick.config import clear_config_cache

    monkeypatch.setenv("SSHPICK_CONFIG_DIR", str(tmp_path / "sshpick-config"))
    clear_config_cache()

    yield

    clear_config_cache()


class FakeTerminal:
    """Records what the selector draws instead of talking to a tty."""

    def __init__(self, rows: int = 10, supported: bool = True):
        self.row = rows
        self.current = rows
        self.supported = supported
        self.lines: dict[int, str] = {}
        self.events: list[tuple] = []
        self.sessions = 0
        self.restores = 0
        self.cursor_hidden = False

    def check_supported(self) -> None:
        from sshpick.errors import UnsupportedTerminalError

        if not self.supported:
            raise UnsupportedTerminalError("output is not an ANSI terminal")

    def cursor_row(self) -> int:
        self.events.append(("query", self.row))
        return self.row

    @contextmanager
    def session(self):
        self.sessions += 1
        self.cursor_hidden = True
        try:
            yield self
        finally:
            self.restores += 1
            self.cursor_hidden = False

    def move_to(self, row: int, column: int = 1) -> None:
        self.current = row
        self.events.append(("move", row))

    def clear_line(self) -> None:
        self.lines[self.current] = ""

    def write(self, markup: str) -> None:
        self.lines[self.current] = self.lines.get(self.current, "") + markup
        self.events.append(("write", markup))

    def newline(self, count: int = 1) -> None:
        self.events.append(("newline", count))
        self.row += count


@pytest.fixture
def fake_terminal():
    return FakeTerminal()


def keys_from(*presses):
    """Key reader returning presses in order. Exceptions in the list are raised."""
    it = iter(presses)

    def read_key() -> str:
        key = next(it)
        if isinstance(key, BaseException) or (
            isinstance(key, type) and issubclass(key, BaseException)
        ):
            raise key
        return key

    return read_key


@pytest.fixture
def make_reader():
    return keys_from


@pytest.fixture
def make_terminal():
    return FakeTerminal
