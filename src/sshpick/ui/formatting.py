"""Rich markup for selector rows, the status line and the key legend."""

from rich.markup import escape

CHECKED = "[[color(46)]✔[/color(46)]]"
UNCHECKED = "[ ]"

LEGEND: list[tuple[str, str]] = [
    ("j or ↓", "down"),
    ("k or ↑", "up"),
    ("⎵ (Space)", "toggle selection"),
    ("⏎ (Enter)", "confirm selection"),
]


def format_checkbox(checked: bool) -> str:
    return CHECKED if checked else UNCHECKED


def format_row(label: str, checked: bool, active: bool) -> str:
    """Format one option row.

    Args:
        label: Option label (plain text, escaped here)
        checked: Whether the option is ticked
        active: Whether the cursor is on this row

    Returns:
        Rich markup string for the row
    """
    prefix = format_checkbox(checked)
    text = escape(label)
    if active:
        return f"{prefix}  [reverse] {text} [/reverse]"
    return f"{prefix}   {text} "


def format_limit_warning(max_selected: int) -> str:
    return (
        f"[bold bright_white on red] too many keys selected, "
        f"please select up to {max_selected} keys [/bold bright_white on red]"
    )


def format_legend() -> list[str]:
    """Key binding lines shown above the options."""
    width = max(len(keys) for keys, _ in LEGEND) + 2
    return [escape(f"{keys:<{width}}=> {action}") for keys, action in LEGEND]


def format_title(title: str) -> str:
    return f"[bold]{escape(title)}[/bold]"
