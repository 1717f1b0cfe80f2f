"""Data models for sshpick."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class KeyAction(Enum):
    """Logical action decoded from a key press."""

    CONFIRM = "confirm"
    TOGGLE = "toggle"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"


@dataclass(frozen=True)
class Option:
    """One selectable row: a label and whether it starts ticked."""

    label: str
    default_selected: bool = False


@dataclass
class SelectionState:
    """Mutable state of one selector invocation.

    `selected` is index-aligned with `options`. `selected_count` is counted
    from `selected` on creation and kept in step by the transition functions
    in `sshpick.selection`.
    """

    options: tuple[Option, ...]
    selected: list[bool]
    max_selected: int
    active_index: int = 0
    selected_count: int = field(init=False)

    def __post_init__(self) -> None:
        self.selected_count = self.count_selected()

    @property
    def over_limit(self) -> bool:
        return self.selected_count > self.max_selected

    def count_selected(self) -> int:
        """Recount ticked rows from scratch."""
        return sum(1 for s in self.selected if s)


@dataclass(frozen=True)
class SshKey:
    """A public key as printed by `ssh-add -L` or stored in a .pub file."""

    key_type: str
    blob: str
    comment: str = ""
    source: Path | None = None

    @property
    def label(self) -> str:
        """Human-readable name shown in the selector."""
        comment = self.comment.strip()
        if comment and comment != "no comment":
            return comment
        if self.source is not None:
            return self.source.stem
        return f"{self.key_type} ...{self.blob[-12:]}"

    @property
    def public_line(self) -> str:
        """Key in authorized_keys format."""
        parts = [self.key_type, self.blob]
        if self.comment:
            parts.append(self.comment)
        return " ".join(parts)


@dataclass
class CopyIdOptions:
    """Flags forwarded to ssh-copy-id."""

    target: str
    force: bool = False
    dry_run: bool = False
    sftp: bool = False
    port: int | None = None
    ssh_options: list[str] = field(default_factory=list)
