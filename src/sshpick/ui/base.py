"""UI protocol for swappable menu implementations."""

from typing import Protocol


class MenuUI(Protocol):
    """Protocol for swappable menu implementations."""

    def multi_select(self, options: list[str], selected: list[bool], title: str = "") -> list[bool]:
        """Checkboxes, return one bool per option."""
        ...

    def confirm(self, message: str) -> bool:
        """Yes/no prompt."""
        ...
