"""Selection state transitions.

These functions hold all of the selector's rules and never touch the
terminal, so they can be driven directly from tests.
"""

from __future__ import annotations

from collections.abc import Sequence

from sshpick.errors import InvalidInputError
from sshpick.models import KeyAction, Option, SelectionState

# Most rows that may be ticked when confirming. Older releases rejected
# confirmation at four or more, which is max_selected=3.
MAX_SELECTED = 5


def build_options(labels: Sequence[str], defaults: Sequence[bool] | None = None) -> list[Option]:
    """Pair labels with their default state.

    Raises:
        InvalidInputError: no labels, or defaults of a different length.
    """
    if not labels:
        raise InvalidInputError("at least one option is required")
    if defaults is None:
        defaults = [False] * len(labels)
    if len(defaults) != len(labels):
        raise InvalidInputError(
            f"got {len(defaults)} defaults for {len(labels)} options"
        )
    return [Option(str(label), bool(default)) for label, default in zip(labels, defaults)]


def new_state(
    labels: Sequence[str],
    defaults: Sequence[bool] | None = None,
    max_selected: int = MAX_SELECTED,
) -> SelectionState:
    """Create a fresh state with defaults applied and the first row active."""
    if not isinstance(max_selected, int) or isinstance(max_selected, bool):
        raise InvalidInputError(f"max_selected must be an integer, got {max_selected!r}")
    if max_selected < 0:
        raise InvalidInputError(f"max_selected must not be negative, got {max_selected}")
    options = tuple(build_options(labels, defaults))
    selected = [o.default_selected for o in options]
    return SelectionState(
        options=options,
        selected=selected,
        active_index=0,
        max_selected=max_selected,
    )


def toggle(state: SelectionState, index: int | None = None) -> bool:
    """Flip one row (the active one by default). Returns its new value.

    Raises:
        InvalidInputError: index outside the option list.
    """
    if index is None:
        index = state.active_index
    elif not 0 <= index < len(state.options):
        raise InvalidInputError(f"no option at index {index}")
    if state.selected[index]:
        state.selected[index] = False
        state.selected_count -= 1
    else:
        state.selected[index] = True
        state.selected_count += 1
    return state.selected[index]


def move(state: SelectionState, delta: int) -> int:
    """Move the active row by delta, wrapping at both ends."""
    state.active_index = (state.active_index + delta) % len(state.options)
    return state.active_index


def try_confirm(state: SelectionState) -> bool:
    """Return True if the current selection may be accepted."""
    return state.selected_count <= state.max_selected


def apply(state: SelectionState, action: KeyAction | None) -> bool:
    """Apply a decoded action. Returns True when the loop should end."""
    if action is KeyAction.TOGGLE:
        toggle(state)
    elif action is KeyAction.MOVE_UP:
        move(state, -1)
    elif action is KeyAction.MOVE_DOWN:
        move(state, 1)
    elif action is KeyAction.CONFIRM:
        return try_confirm(state)
    return False


def selected_indices(selection: Sequence[bool]) -> list[int]:
    """Indices of ticked entries in a selection vector."""
    return [i for i, s in enumerate(selection) if s]
