"""Tests for selector markup."""

from rich.console import Console

from sshpick.ui.formatting import format_legend, format_limit_warning, format_row


def _plain(markup: str) -> str:
    console = Console(width=200, color_system=None, record=True)
    console.print(markup, end="")
    return console.export_text().rstrip()


def test_inactive_row():
    assert _plain(format_row("work laptop", checked=False, active=False)) == "[ ]   work laptop"


def test_active_checked_row():
    markup = format_row("work", checked=True, active=True)
    assert "[reverse]" in markup
    assert _plain(markup) == "[✔]   work"


def test_checkmark_is_green():
    assert "color(46)" in format_row("a", checked=True, active=False)


def test_label_markup_is_escaped():
    assert _plain(format_row("[bold]me[/bold]", checked=False, active=False)) == (
        "[ ]   [bold]me[/bold]"
    )


def test_limit_warning_mentions_limit():
    text = _plain(format_limit_warning(5))
    assert "too many keys selected" in text
    assert "up to 5 keys" in text


def test_legend_lines():
    lines = [_plain(line) for line in format_legend()]
    assert len(lines) == 4
    assert lines[0].startswith("j or ↓")
    assert lines[0].endswith("=> down")
    assert lines[3].endswith("=> confirm selection")
