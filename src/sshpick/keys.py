"""Public key discovery from ssh-agent and the ssh directory."""

import logging
import re
import subprocess
from pathlib import Path

from sshpick.errors import KeySourceError
from sshpick.models import SshKey

logger = logging.getLogger("sshpick.keys")

SSH_ADD_TIMEOUT = 10
NO_IDENTITIES_EXIT = 1

_TYPE_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")


def parse_public_keys(text: str, source: Path | None = None) -> list[SshKey]:
    """Parse authorized_keys-style lines.

    Blank lines, comments and lines without a key blob are skipped. Repeated
    keys (same type and blob) keep their first occurrence.
    """
    keys: list[SshKey] = []
    seen: set[tuple[str, str]] = set()
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split(None, 2)
        if len(parts) < 2:
            logger.debug("Skipping malformed key line %d: %r", lineno, line[:40])
            continue
        key_type, blob = parts[0], parts[1]
        if (key_type, blob) in seen:
            continue
        seen.add((key_type, blob))
        comment = parts[2].strip() if len(parts) > 2 else ""
        keys.append(SshKey(key_type=key_type, blob=blob, comment=comment, source=source))
    return keys


def agent_keys() -> list[SshKey]:
    """List keys loaded in ssh-agent via `ssh-add -L`.

    Returns an empty list when the agent holds no identities.

    Raises:
        KeySourceError: ssh-add is missing, or no agent could be reached.
    """
    try:
        result = subprocess.run(
            ["ssh-add", "-L"],
            capture_output=True,
            text=True,
            timeout=SSH_ADD_TIMEOUT,
        )
    except FileNotFoundError as e:
        raise KeySourceError("ssh-add not found on PATH") from e
    except subprocess.TimeoutExpired as e:
        raise KeySourceError("ssh-add timed out") from e

    if result.returncode == NO_IDENTITIES_EXIT:
        logger.debug("ssh-agent has no identities")
        return []
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit {result.returncode}"
        raise KeySourceError(f"cannot list agent keys: {detail}")

    return parse_public_keys(result.stdout)


def local_keys(ssh_dir: Path) -> list[SshKey]:
    """Public keys in ssh_dir that have a matching private key file."""
    if not ssh_dir.is_dir():
        raise KeySourceError(f"ssh directory not found: {ssh_dir}")

    keys: list[SshKey] = []
    for pub in sorted(ssh_dir.glob("*.pub")):
        if not pub.with_suffix("").is_file():
            continue
        try:
            parsed = parse_public_keys(pub.read_text(), source=pub)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable key %s: %s", pub, e)
            continue
        if not parsed:
            logger.warning("Skipping %s: no public key found", pub)
            continue
        keys.append(parsed[0])
    return keys


def key_fingerprint_name(pub_path: Path) -> str | None:
    """Key name as reported by `ssh-keygen -lf`, without the type suffix.

    Falls back to the file stem when the key has no comment. Returns None if
    ssh-keygen cannot read the file.
    """
    try:
        result = subprocess.run(
            ["ssh-keygen", "-lf", str(pub_path)],
            capture_output=True,
            text=True,
            timeout=SSH_ADD_TIMEOUT,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("ssh-keygen failed for %s: %s", pub_path, e)
        return None

    if result.returncode != 0:
        return None

    # "<bits> <fingerprint> <comment...> (<TYPE>)"
    fields = result.stdout.strip().split(None, 2)
    name = _TYPE_SUFFIX.sub("", fields[2]).strip() if len(fields) > 2 else ""
    if not name or name == "no comment":
        return pub_path.stem
    return name
