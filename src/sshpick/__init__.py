"""sshpick - pick which SSH keys to hand to ssh-copy-id."""

__version__ = "0.3.0"
