"""Tests for monitor.ssh.keys: normalization, PPK detection, transient files."""

from __future__ import annotations

import stat

import pytest

from monitor.errors import UnsupportedKeyFormat
from monitor.ssh.keys import (
    TransientKeyFile,
    ensure_supported_key_format,
    normalize_private_key,
)


class TestNormalize:
    def test_escaped_newlines(self):
        assert normalize_private_key("a\\nb\\nc") == "a\nb\nc"

    def test_crlf_and_cr(self):
        assert normalize_private_key("a\r\nb\rc") == "a\nb\nc"

    def test_mixed_and_trimmed(self):
        assert normalize_private_key("  \r\na\\nb\r\n\r\n  ") == "a\nb"


class TestPpkDetection:
    def test_ppk_rejected(self, ppk_key):
        with pytest.raises(UnsupportedKeyFormat) as exc_info:
            ensure_supported_key_format(ppk_key)
        assert exc_info.value.status_code == 400
        assert "puttygen" in exc_info.value.message.lower()

    def test_marker_anywhere_rejected(self, openssh_key):
        with pytest.raises(UnsupportedKeyFormat):
            ensure_supported_key_format(openssh_key + "\nPuTTY-User-Key-File-2: ssh-rsa")

    def test_openssh_accepted(self, openssh_key):
        ensure_supported_key_format(openssh_key)


class TestTransientKeyFile:
    def test_written_owner_only_and_removed(self, key_dir, openssh_key):
        key_file = TransientKeyFile(key_dir, openssh_key)
        with key_file as path:
            assert path.exists()
            assert path.parent == key_dir
            assert path.read_text() == openssh_key + "\n"
            assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert not key_file.exists

    def test_removed_when_body_raises(self, key_dir, openssh_key):
        key_file = TransientKeyFile(key_dir, openssh_key)
        with pytest.raises(RuntimeError):
            with key_file:
                raise RuntimeError("boom")
        assert not key_file.exists

    def test_unique_names(self, key_dir, openssh_key):
        names = {TransientKeyFile(key_dir, openssh_key).path.name for _ in range(50)}
        assert len(names) == 50
        assert all(name.startswith("key-") for name in names)

    def test_directory_created(self, tmp_path, openssh_key):
        nested = tmp_path / "a" / "b"
        with TransientKeyFile(nested, openssh_key):
            assert nested.is_dir()

    def test_remove_is_idempotent(self, key_dir, openssh_key):
        key_file = TransientKeyFile(key_dir, openssh_key)
        key_file.write()
        key_file.remove()
        key_file.remove()
        assert not key_file.exists
