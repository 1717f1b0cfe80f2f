"""Rich + simple-term-menu implementation."""

from rich.console import Console
from simple_term_menu import TerminalMenu

from sshpick.selection import MAX_SELECTED

from .multiselect import MultiSelect
from .terminal import DEFAULT_QUERY_TIMEOUT, Terminal


class RichTerminalMenu:
    """Checkbox selection through MultiSelect, yes/no through simple-term-menu."""

    def __init__(
        self,
        console: Console | None = None,
        show_help: bool = True,
        max_selected: int = MAX_SELECTED,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        self.console = console or Console(highlight=False)
        self.show_help = show_help
        self.max_selected = max_selected
        self.query_timeout = query_timeout

    def multi_select(self, options: list[str], selected: list[bool], title: str = "") -> list[bool]:
        terminal = Terminal(self.console, query_timeout=self.query_timeout)
        picker = MultiSelect(
            options,
            selected,
            show_help=self.show_help,
            max_selected=self.max_selected,
            terminal=terminal,
            title=title,
        )
        return picker.show()

    def confirm(self, message: str) -> bool:
        menu = TerminalMenu(["Yes", "No"], title=message)
        return menu.show() == 0
