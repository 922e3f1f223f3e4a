"""Tests for ManifestRunner."""

import io
import os
from dataclasses import replace
from pathlib import Path

import pytest

from makofind.manifest.runner import ManifestRunner, NoRootsError, RootOutcome
from makofind.walker import filesystem


def _build_tree(root: Path) -> list[Path]:
    root.mkdir()
    (root / "acct-1").mkdir()
    (root / "acct-2").mkdir()
    files = [
        root / "acct-1" / "obj-1",
        root / "acct-1" / "obj-2",
        root / "acct-2" / "obj-3",
        root / "top-level",
    ]
    for index, path in enumerate(files):
        path.write_bytes(b"x" * (index * 700))
    return files


def _manifest_paths(output: str) -> list[str]:
    return [line.split("\t")[0] for line in output.splitlines()]


def _mark_unknown(monkeypatch, target: Path) -> None:
    real_lstat_snapshot = filesystem.lstat_snapshot

    def fake_lstat_snapshot(path):
        snapshot = real_lstat_snapshot(path)
        if path == str(target):
            return replace(snapshot, mode=0o644)
        return snapshot

    monkeypatch.setattr(filesystem, "lstat_snapshot", fake_lstat_snapshot)


class TestManifestRunner:
    """Tests for ManifestRunner class."""

    def test_every_file_listed_once(self, tmp_path: Path):
        files = _build_tree(tmp_path / "manta")
        stream = io.StringIO()

        result = ManifestRunner(stream).run([tmp_path / "manta"])

        assert sorted(_manifest_paths(stream.getvalue())) == sorted(str(f) for f in files)
        assert not result.failed
        assert result.stats.files_emitted == 4
        assert result.roots[0].outcome is RootOutcome.COMPLETED

    def test_manifest_fields(self, tmp_path: Path):
        root = tmp_path / "manta"
        root.mkdir()
        target = root / "obj"
        target.write_bytes(b"y" * 5000)
        os.utime(target, ns=(1_700_000_000_123_456_789, 1_700_000_000_123_456_789))
        stream = io.StringIO()

        ManifestRunner(stream).run([str(root)])

        path, size, mtime, physical = stream.getvalue().rstrip("\n").split("\t")
        blocks = os.lstat(target).st_blocks
        assert path == str(target)
        assert size == "5000"
        assert mtime == "1700000000.1234567890"
        assert int(physical) == blocks // 2 + blocks % 2

    def test_symlinks_never_listed(self, tmp_path: Path):
        files = _build_tree(tmp_path / "manta")
        root = tmp_path / "manta"
        (root / "link-to-acct").symlink_to(root / "acct-1")
        (root / "link-to-obj").symlink_to(files[0])
        stream = io.StringIO()

        result = ManifestRunner(stream).run([root])

        paths = _manifest_paths(stream.getvalue())
        assert sorted(paths) == sorted(str(f) for f in files)
        assert result.stats.symlinks_skipped == 2
        assert not result.failed

    def test_unknown_kind_aborts_root_but_not_run(self, tmp_path: Path, monkeypatch):
        first = tmp_path / "first"
        first.mkdir()
        odd = first / "odd"
        odd.write_text("odd")
        second_files = _build_tree(tmp_path / "second")
        _mark_unknown(monkeypatch, odd)
        stream = io.StringIO()

        result = ManifestRunner(stream).run([first, tmp_path / "second"])

        paths = _manifest_paths(stream.getvalue())
        assert str(odd) not in paths
        for f in second_files:
            assert str(f) in paths
        assert [r.outcome for r in result.roots] == [RootOutcome.ABORTED, RootOutcome.COMPLETED]
        assert result.failed

    def test_fail_fast_skips_remaining_roots(self, tmp_path: Path, monkeypatch):
        first = tmp_path / "first"
        first.mkdir()
        odd = first / "odd"
        odd.write_text("odd")
        _build_tree(tmp_path / "second")
        _mark_unknown(monkeypatch, odd)
        stream = io.StringIO()

        result = ManifestRunner(stream, fail_fast=True).run([first, tmp_path / "second"])

        assert stream.getvalue() == ""
        assert [r.outcome for r in result.roots] == [RootOutcome.ABORTED, RootOutcome.SKIPPED]
        assert result.failed

    def test_missing_root_fails_and_continues(self, tmp_path: Path, caplog):
        files = _build_tree(tmp_path / "manta")
        stream = io.StringIO()

        result = ManifestRunner(stream).run([tmp_path / "missing", tmp_path / "manta"])

        assert sorted(_manifest_paths(stream.getvalue())) == sorted(str(f) for f in files)
        assert [r.outcome for r in result.roots] == [RootOutcome.FAILED, RootOutcome.COMPLETED]
        assert result.failed
        assert f"An error occurred traversing {tmp_path / 'missing'}" in caplog.text

    def test_depth_limit_fails_root(self, tmp_path: Path):
        root = tmp_path / "deep"
        current = root
        for level in range(4):
            current = current / f"level{level}"
        current.mkdir(parents=True)
        (current / "leaf").write_text("leaf")
        stream = io.StringIO()

        result = ManifestRunner(stream, max_depth=2).run([root])

        assert str(current / "leaf") not in _manifest_paths(stream.getvalue())
        assert result.roots[0].outcome is RootOutcome.FAILED
        assert result.failed

    def test_repeated_runs_identical(self, tmp_path: Path):
        _build_tree(tmp_path / "manta")
        first, second = io.StringIO(), io.StringIO()

        ManifestRunner(first).run([tmp_path / "manta"])
        ManifestRunner(second).run([tmp_path / "manta"])

        assert first.getvalue() == second.getvalue()

    def test_roots_processed_in_order_without_dedup(self, tmp_path: Path):
        root = tmp_path / "manta"
        root.mkdir()
        (root / "obj").write_text("obj")
        stream = io.StringIO()

        result = ManifestRunner(stream).run([root, root])

        assert _manifest_paths(stream.getvalue()) == [str(root / "obj")] * 2
        assert len(result.roots) == 2

    def test_no_roots_raises(self):
        with pytest.raises(NoRootsError):
            ManifestRunner(io.StringIO()).run([])
