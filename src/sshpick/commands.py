"""Build and run ssh-copy-id commands for the chosen keys."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from sshpick.errors import CommandError, InvalidInputError
from sshpick.models import CopyIdOptions, SshKey

logger = logging.getLogger("sshpick.commands")

DEFAULT_PROGRAM = "ssh-copy-id"

_SLUG_INVALID = re.compile(r"[^a-z0-9._-]+")


def slugify(text: str) -> str:
    """Turn a key label into a safe file name stem."""
    slug = _SLUG_INVALID.sub("-", text.lower()).strip("-.")
    return slug or "key"


def selected_keys(keys: Sequence[SshKey], selection: Sequence[bool]) -> list[SshKey]:
    """Keys whose entry in the selection vector is True."""
    if len(keys) != len(selection):
        raise InvalidInputError(f"selection has {len(selection)} entries for {len(keys)} keys")
    return [key for key, chosen in zip(keys, selection) if chosen]


def build_command(
    key_file: Path | str,
    opts: CopyIdOptions,
    program: str = DEFAULT_PROGRAM,
) -> list[str]:
    """Argument vector installing one key file on opts.target."""
    argv = shlex.split(program)
    if opts.force:
        argv.append("-f")
    if opts.dry_run:
        argv.append("-n")
    if opts.sftp:
        argv.append("-s")
    if opts.port is not None:
        argv.extend(["-p", str(opts.port)])
    for option in opts.ssh_options:
        argv.extend(["-o", option])
    argv.extend(["-i", str(key_file), opts.target])
    return argv


def format_command(argv: Sequence[str]) -> str:
    return shlex.join(argv)


def key_file_names(keys: Sequence[SshKey]) -> list[str]:
    """Unique `<slug>.pub` names, suffixing -2, -3... on collisions."""
    names: list[str] = []
    used: set[str] = set()
    for key in keys:
        stem = slugify(key.label)
        name = f"{stem}.pub"
        n = 2
        while name in used:
            name = f"{stem}-{n}.pub"
            n += 1
        used.add(name)
        names.append(name)
    return names


def write_key_files(keys: Sequence[SshKey], directory: Path) -> list[Path]:
    """Write each key's public line to its own file in directory."""
    directory.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for key, name in zip(keys, key_file_names(keys)):
        path = directory / name
        path.write_text(key.public_line + "\n")
        paths.append(path)
    return paths


def run_command(argv: Sequence[str]) -> int:
    """Run a command attached to the terminal and return its exit code."""
    logger.debug("Running %s", format_command(argv))
    try:
        result = subprocess.run(list(argv))
    except FileNotFoundError as e:
        raise CommandError(f"{argv[0]} not found on PATH") from e
    if result.returncode != 0:
        logger.warning("%s exited with %d", argv[0], result.returncode)
    return result.returncode
