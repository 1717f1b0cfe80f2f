"""In-place checkbox list driven by single key presses."""

import logging
from collections.abc import Callable, Sequence

from sshpick.errors import SelectionCancelledError
from sshpick.selection import MAX_SELECTED, apply, new_state

from . import keys
from .formatting import format_legend, format_limit_warning, format_row, format_title
from .terminal import Terminal

logger = logging.getLogger("sshpick.selector")


class MultiSelect:
    """Checkbox list that redraws below the current cursor position.

    Example:
        picker = MultiSelect(["id_ed25519", "work"], defaults=[True, False])
        selected = picker.show()  # [True, False] after Enter
    """

    def __init__(
        self,
        options: Sequence[str],
        defaults: Sequence[bool] | None = None,
        show_help: bool = False,
        max_selected: int = MAX_SELECTED,
        terminal: Terminal | None = None,
        read_key: Callable[[], str] | None = None,
        title: str = "",
    ):
        """Initialize the selector.

        Args:
            options: Labels, in display order. Must not be empty.
            defaults: Initial tick state per option. None means all unticked.
            show_help: Print the key legend before the list.
            max_selected: Most ticked rows Enter will accept.
            terminal: Terminal to draw on. Default wraps stdout/stdin.
            read_key: Blocking key reader. Default is readchar.readkey.
            title: Heading printed above the legend, once the terminal has
                answered the cursor position query.

        Raises:
            InvalidInputError: empty options or mismatched defaults.
        """
        self.state = new_state(options, defaults, max_selected)
        self.show_help = show_help
        self.title = title
        self.terminal = terminal or Terminal()
        self._read_key = read_key or keys.read_key
        self.start_row = 0
        self.last_row = 0

    def show(self) -> list[bool]:
        """Run until a valid confirm. Returns the selection vector.

        Raises:
            UnsupportedTerminalError: before anything is drawn.
            SelectionCancelledError: on Ctrl-C, after the terminal is restored.
        """
        term = self.terminal
        count = len(self.state.options)

        term.check_supported()
        term.cursor_row()  # fail before drawing if the terminal can't answer

        if self.title:
            term.write(format_title(self.title))
            term.newline()
        if self.show_help:
            for line in format_legend():
                term.write(line)
                term.newline()
            term.newline()

        term.newline(count)
        self.last_row = term.cursor_row()
        self.start_row = self.last_row - count
        logger.debug("selector drawing %d options from row %d", count, self.start_row)

        try:
            with term.session():
                while True:
                    self.render(self.state.active_index)
                    if apply(self.state, keys.decode_key(self._read_key())):
                        break
                self.render(None)
        except KeyboardInterrupt:
            self._park_cursor()
            logger.debug("selector cancelled")
            raise SelectionCancelledError("selection cancelled") from None

        self._park_cursor()
        return list(self.state.selected)

    def render(self, active: int | None) -> None:
        """Redraw every row and the status line. active=None highlights nothing."""
        state = self.state
        term = self.terminal
        for i, option in enumerate(state.options):
            term.move_to(self.start_row + i)
            term.clear_line()
            term.write(format_row(option.label, state.selected[i], i == active))

        term.move_to(self.start_row + len(state.options))
        term.clear_line()
        if state.over_limit:
            term.write(format_limit_warning(state.max_selected))

    def _park_cursor(self) -> None:
        self.terminal.move_to(self.last_row)
        self.terminal.newline()


def select(
    show_help: bool,
    options: Sequence[str],
    defaults: Sequence[bool] | None = None,
    *,
    max_selected: int = MAX_SELECTED,
    terminal: Terminal | None = None,
    read_key: Callable[[], str] | None = None,
) -> list[bool]:
    """Show a checkbox list and return one bool per option."""
    picker = MultiSelect(
        options,
        defaults,
        show_help=show_help,
        max_selected=max_selected,
        terminal=terminal,
        read_key=read_key,
    )
    return picker.show()


multiselect = select
