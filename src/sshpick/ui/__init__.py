"""UI module."""

from .base import MenuUI
from .multiselect import MultiSelect, multiselect, select
from .rich_menu import RichTerminalMenu
from .terminal import Terminal

__all__ = [
    "MenuUI",
    "MultiSelect",
    "RichTerminalMenu",
    "Terminal",
    "multiselect",
    "select",
]
