"""Key press decoding for the selector."""

import readchar

from sshpick.models import KeyAction

_ENTER_KEYS = {"", "\r", "\n", readchar.key.ENTER}
_UP_KEYS = {"k", readchar.key.UP, "\x1bOA"}
_DOWN_KEYS = {"j", readchar.key.DOWN, "\x1bOB"}


def decode_key(key: str) -> KeyAction | None:
    """Map a key press to an action. Unknown keys and escapes give None."""
    if key in _ENTER_KEYS:
        return KeyAction.CONFIRM
    if key == " ":
        return KeyAction.TOGGLE
    if key in _UP_KEYS:
        return KeyAction.MOVE_UP
    if key in _DOWN_KEYS:
        return KeyAction.MOVE_DOWN
    return None


def read_key() -> str:
    """Block until one key press (or escape sequence) is available."""
    return readchar.readkey()
