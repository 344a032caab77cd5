import logging
import os

import pytest

from retention import (
    ActionOutcome,
    ConfigurationError,
    GroupSpec,
    MissingTargetError,
    RunMode,
    purge,
    purge_group,
    resolve_group,
    run,
)


def _names(path):
    return sorted(p.name for p in path.iterdir())


def test_file_mode_keeps_newest(tmp_path, make_tree):
    root = tmp_path / "logs"
    make_tree(root, 10)

    (report,) = purge([GroupSpec(root=root)], keep_count=2)

    assert _names(root) == ["8", "9"]
    assert len(report.deleted) == 8
    assert report.failed == []
    assert [e.path.name for e in report.kept] == ["9", "8"]
    assert report.summary() == "8 deleted, 0 failed"


def test_dry_run_changes_nothing(tmp_path, make_tree, caplog):
    root = tmp_path / "logs"
    make_tree(root, 10)

    with caplog.at_level(logging.INFO):
        (report,) = purge([GroupSpec(root=root)], keep_count=2, mode=RunMode.DRY_RUN)

    assert len(_names(root)) == 10
    assert len(report.would_delete) == 8
    assert report.deleted == []
    messages = [r.getMessage() for r in caplog.records]
    assert sum(m.startswith("Would keep") for m in messages) == 2
    assert sum(m.startswith("Would delete") for m in messages) == 8


def test_dry_run_directory_mode_changes_nothing(tmp_path, make_tree):
    root = tmp_path / "builds"
    for d in make_tree(root, 5, directories=True):
        (d / "artifact.bin").write_text("x")

    purge(
        [GroupSpec(root=root)],
        keep_count=1,
        mode=RunMode.DRY_RUN,
        purge_directories=True,
    )

    assert len(_names(root)) == 5
    assert all((root / n / "artifact.bin").exists() for n in _names(root))


def test_fewer_entries_than_keep_is_noop(tmp_path, make_tree):
    root = tmp_path / "logs"
    make_tree(root, 3)

    (report,) = purge([GroupSpec(root=root)], keep_count=3)

    assert len(_names(root)) == 3
    assert report.actions == []
    assert len(report.kept) == 3


def test_directory_mode_adjusts_keep_for_root(tmp_path, make_tree, touch):
    root = tmp_path / "builds"
    children = make_tree(root, 10, directories=True)
    for i, child in enumerate(children):
        (child / "out.txt").write_text("x")
        mtime_ns = (1_600_000_000 + i * 60) * 1_000_000_000
        os.utime(child, ns=(mtime_ns, mtime_ns))
    # root older than every child: it must still survive
    touch(root, 1_000, directory=True)

    group = resolve_group(GroupSpec(root=root), keep_count=2, purge_directories=True)
    assert len(group) == 11

    report = purge_group(group, RunMode.EXECUTE)

    assert root.exists()
    assert report.effective_keep == 3
    assert report.kept[0].is_root
    assert _names(root) == ["8", "9"]
    assert len(report.deleted) == 8


def test_directory_mode_narrow_include_does_not_adjust(tmp_path, make_tree):
    root = tmp_path / "builds"
    make_tree(root, 4, directories=True)

    (report,) = purge(
        [GroupSpec(root=root, includes=("*",))],
        keep_count=1,
        purge_directories=True,
    )

    assert report.effective_keep == 1
    assert _names(root) == ["3"]


def test_directory_mode_nested_candidates(tmp_path, touch):
    root = tmp_path / "builds"
    touch(root / "old" / "nested", 100, directory=True)
    touch(root / "old", 100, directory=True)
    touch(root / "new", 200, directory=True)

    (report,) = purge([GroupSpec(root=root)], keep_count=1, purge_directories=True)

    assert _names(root) == ["new"]
    assert report.failed == []


def test_directory_mode_newer_nested_dirs_do_not_take_keep_slots(tmp_path, touch):
    root = tmp_path / "builds"
    for i in range(10):
        touch(root / f"build-{i}" / "classes", 2_000 + i, directory=True)
        touch(root / f"build-{i}", 1_000 + i, directory=True)

    (report,) = purge([GroupSpec(root=root)], keep_count=2, purge_directories=True)

    assert [e.relpath for e in report.kept] == ["", "build-9", "build-8"]
    assert _names(root) == ["build-8", "build-9"]
    assert (root / "build-9" / "classes").exists()
    assert len(report.deleted) == 8

    # a re-scan finds exactly the kept children
    (again,) = purge([GroupSpec(root=root)], keep_count=2, purge_directories=True)
    assert again.actions == []


def test_groups_are_independent(tmp_path, make_tree):
    a = tmp_path / "a"
    b = tmp_path / "b"
    make_tree(a, 10)
    make_tree(b, 10, base=1_700_000_000)

    reports = purge([GroupSpec(root=a), GroupSpec(root=b)], keep_count=2)

    assert len(reports) == 2
    assert _names(a) == ["8", "9"]
    assert _names(b) == ["8", "9"]


def test_same_root_twice_in_directory_mode(tmp_path, make_tree):
    root = tmp_path / "multi"
    make_tree(root, 10, directories=True)

    purge(
        [GroupSpec(root=root), GroupSpec(root=root)],
        keep_count=2,
        purge_directories=True,
    )

    assert root.exists()
    assert len(_names(root)) == 2


def test_missing_target_does_not_stop_group(tmp_path, make_tree):
    root = tmp_path / "logs"
    paths = make_tree(root, 10)
    group = resolve_group(GroupSpec(root=root), keep_count=2)

    # an external process removes one of the oldest files after the scan
    paths[0].unlink()

    (report,) = run([group], RunMode.EXECUTE)

    assert _names(root) == ["8", "9"]
    assert len(report.deleted) == 7
    assert len(report.failed) == 1
    failure = report.failed[0]
    assert failure.entry.path.name == "0"
    assert failure.outcome is ActionOutcome.FAILED
    assert isinstance(failure.error, MissingTargetError)
    assert report.summary() == "7 deleted, 1 failed"


def test_bad_root_aborts_before_any_deletion(tmp_path, make_tree):
    good = tmp_path / "good"
    make_tree(good, 5)

    with pytest.raises(ConfigurationError) as exc:
        purge([GroupSpec(root=good), GroupSpec(root=tmp_path / "missing")], keep_count=1)

    assert "missing" in str(exc.value)
    assert len(_names(good)) == 5


def test_negative_keep_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        purge([GroupSpec(root=tmp_path)], keep_count=-1)


def test_rerun_is_idempotent(tmp_path, make_tree):
    root = tmp_path / "logs"
    make_tree(root, 6)

    purge([GroupSpec(root=root)], keep_count=2)
    (second,) = purge([GroupSpec(root=root)], keep_count=2)

    assert _names(root) == ["4", "5"]
    assert second.actions == []


def test_report_as_dict(tmp_path, make_tree):
    root = tmp_path / "logs"
    make_tree(root, 3)

    (report,) = purge([GroupSpec(root=root)], keep_count=1, mode=RunMode.DRY_RUN)
    data = report.as_dict()

    assert data["mode"] == "dry-run"
    assert data["keep_count"] == 1
    assert len(data["kept"]) == 1
    assert [a["outcome"] for a in data["actions"]] == ["would-delete"] * 2
