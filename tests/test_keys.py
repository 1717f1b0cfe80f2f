"""Tests for public key discovery."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sshpick.errors import KeySourceError
from sshpick.keys import agent_keys, key_fingerprint_name, local_keys, parse_public_keys

ED25519 = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIJ0kXzL0bqgyJ3 alice@laptop"
RSA = "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQC7 work key"


def _completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestParsePublicKeys:
    def test_parses_type_blob_comment(self):
        keys = parse_public_keys(f"{ED25519}\n{RSA}\n")
        assert [k.key_type for k in keys] == ["ssh-ed25519", "ssh-rsa"]
        assert keys[0].comment == "alice@laptop"
        assert keys[1].comment == "work key"
        assert keys[1].label == "work key"

    def test_skips_blank_comment_and_malformed_lines(self):
        keys = parse_public_keys(f"\n# header\nbroken\n{ED25519}\n")
        assert len(keys) == 1

    def test_drops_duplicates(self):
        keys = parse_public_keys(f"{ED25519}\n{ED25519.replace('alice', 'bob')}\n")
        assert len(keys) == 1
        assert keys[0].comment == "alice@laptop"

    def test_key_without_comment(self):
        (key,) = parse_public_keys("ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIABCDEFGHIJKL")
        assert key.comment == ""
        assert key.label.startswith("ssh-ed25519 ...")
        assert key.public_line == "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIABCDEFGHIJKL"


class TestAgentKeys:
    def test_lists_agent_keys(self):
        with patch("subprocess.run", return_value=_completed(stdout=f"{ED25519}\n{RSA}\n")) as run:
            keys = agent_keys()
        assert len(keys) == 2
        assert run.call_args[0][0] == ["ssh-add", "-L"]

    def test_no_identities_is_empty(self):
        result = _completed(returncode=1, stdout="The agent has no identities.\n")
        with patch("subprocess.run", return_value=result):
            assert agent_keys() == []

    def test_no_agent_raises(self):
        result = _completed(
            returncode=2,
            stderr="Could not open a connection to your authentication agent.",
        )
        with patch("subprocess.run", return_value=result):
            with pytest.raises(KeySourceError, match="authentication agent"):
                agent_keys()

    def test_missing_ssh_add(self):
        with patch("subprocess.run", side_effect=FileNotFoundError("ssh-add")):
            with pytest.raises(KeySourceError, match="not found"):
                agent_keys()

    def test_timeout(self):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("ssh-add", 10)):
            with pytest.raises(KeySourceError, match="timed out"):
                agent_keys()


class TestLocalKeys:
    def test_only_keys_with_private_counterpart(self, tmp_path: Path):
        (tmp_path / "id_ed25519").write_text("private")
        (tmp_path / "id_ed25519.pub").write_text(ED25519 + "\n")
        (tmp_path / "orphan.pub").write_text(RSA + "\n")

        keys = local_keys(tmp_path)

        assert len(keys) == 1
        assert keys[0].source == tmp_path / "id_ed25519.pub"

    def test_no_comment_uses_file_stem(self, tmp_path: Path):
        (tmp_path / "deploy").write_text("private")
        (tmp_path / "deploy.pub").write_text("ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIXYZ\n")

        (key,) = local_keys(tmp_path)
        assert key.label == "deploy"

    def test_empty_pub_file_skipped(self, tmp_path: Path):
        (tmp_path / "empty").write_text("private")
        (tmp_path / "empty.pub").write_text("")
        assert local_keys(tmp_path) == []

    def test_sorted_by_file_name(self, tmp_path: Path):
        for name, line in (("b", RSA), ("a", ED25519)):
            (tmp_path / name).write_text("private")
            (tmp_path / f"{name}.pub").write_text(line)
        assert [k.source.name for k in local_keys(tmp_path)] == ["a.pub", "b.pub"]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(KeySourceError, match="not found"):
            local_keys(tmp_path / "nope")


class TestFingerprintName:
    def test_strips_type_suffix(self, tmp_path: Path):
        out = "256 SHA256:abcdef alice@laptop (ED25519)\n"
        with patch("subprocess.run", return_value=_completed(stdout=out)):
            assert key_fingerprint_name(tmp_path / "id_ed25519.pub") == "alice@laptop"

    def test_no_comment_uses_stem(self, tmp_path: Path):
        out = "256 SHA256:abcdef no comment (ED25519)\n"
        with patch("subprocess.run", return_value=_completed(stdout=out)):
            assert key_fingerprint_name(tmp_path / "deploy.pub") == "deploy"

    def test_failure_returns_none(self, tmp_path: Path):
        with patch("subprocess.run", return_value=_completed(returncode=255)):
            assert key_fingerprint_name(tmp_path / "bad.pub") is None
