"""Tests for record hashing and BLAKE3 Merkle checksums."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest
from blake3 import blake3

from orcapod.core.hasher import checksum_path, hash_record, sha256_hex
from orcapod.errors import NotFoundError


def _make_tree(root: Path) -> Path:
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"alpha")
    (root / "sub" / "b.txt").write_bytes(b"beta")
    return root


class TestRecordHash:
    def test_sha256_hex(self):
        assert sha256_hex(b"orcapod") == hashlib.sha256(b"orcapod").hexdigest()

    def test_hash_record_uses_utf8(self):
        text = "class: pod\ncommand: échec\n"
        assert hash_record(text) == hashlib.sha256(text.encode("utf-8")).hexdigest()

    def test_lowercase_hex_64(self):
        digest = hash_record("class: pod\n")
        assert len(digest) == 64
        assert digest == digest.lower()


class TestChecksum:
    def test_file_is_blake3_of_content(self, tmp_dir: Path):
        path = tmp_dir / "input.png"
        path.write_bytes(b"\x89PNG fake image")
        assert checksum_path(path) == blake3(b"\x89PNG fake image").hexdigest()

    def test_deterministic(self, tmp_dir: Path):
        root = _make_tree(tmp_dir / "tree")
        assert checksum_path(root) == checksum_path(root)

    def test_same_tree_elsewhere_matches(self, tmp_dir: Path):
        a = _make_tree(tmp_dir / "one")
        b = _make_tree(tmp_dir / "two")
        assert checksum_path(a) == checksum_path(b)

    def test_rename_changes_checksum(self, tmp_dir: Path):
        root = _make_tree(tmp_dir / "tree")
        before = checksum_path(root)
        (root / "a.txt").rename(root / "renamed.txt")
        assert checksum_path(root) != before

    def test_nested_content_change_changes_checksum(self, tmp_dir: Path):
        root = _make_tree(tmp_dir / "tree")
        before = checksum_path(root)
        (root / "sub" / "b.txt").write_bytes(b"BETA")
        assert checksum_path(root) != before

    def test_empty_file_and_empty_dir_differ(self, tmp_dir: Path):
        with_file = tmp_dir / "f"
        with_dir = tmp_dir / "d"
        with_file.mkdir()
        with_dir.mkdir()
        (with_file / "x").write_bytes(b"")
        (with_dir / "x").mkdir()
        assert checksum_path(with_file) != checksum_path(with_dir)

    def test_missing_path(self, tmp_dir: Path):
        with pytest.raises(NotFoundError):
            checksum_path(tmp_dir / "nope")
