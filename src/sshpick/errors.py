"""Exceptions raised by sshpick."""


class SshPickError(Exception):
    """Base class for sshpick errors."""


class InvalidInputError(SshPickError, ValueError):
    """Options or defaults passed to the selector are unusable."""


class UnsupportedTerminalError(SshPickError):
    """The terminal cannot be driven with ANSI control sequences."""


class SelectionCancelledError(SshPickError):
    """The user interrupted the selector before confirming."""


class KeySourceError(SshPickError):
    """Public keys could not be read from the agent or the ssh directory."""


class CommandError(SshPickError):
    """An outbound command could not be started."""
