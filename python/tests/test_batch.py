"""
test_batch.py - Directory batch conversion

Usage:
    pytest python/tests/test_batch.py
"""

import json

import pytest

from vroid2bvh.batch import BatchConverter, validate_bvh_file, main
from vroid2bvh.bvh_parser import load_bvh


def write_pose(path, bones):
    path.write_text(json.dumps({"BoneDefinition": bones}), encoding="utf-8")


@pytest.fixture
def pose_dir(tmp_path):
    src = tmp_path / "poses"
    src.mkdir()
    write_pose(src / "a.vroidpose", {"Hips": {"x": 0, "y": 0, "z": 0, "w": 1}})
    write_pose(src / "b.vroidpose", {})
    (src / "broken.vroidpose").write_text('{"NoBones": 1}', encoding="utf-8")
    (src / "notes.txt").write_text("ignored", encoding="utf-8")
    nested = src / "more"
    nested.mkdir()
    write_pose(nested / "c.vroidpose", {})
    return src


def test_batch_converts_and_reports(pose_dir, tmp_path):
    out = tmp_path / "bvh"
    report = BatchConverter(pose_dir, out, max_workers=2).run(progress=False)

    assert report.successful == 2
    assert report.failed == 1
    assert report.failed_tasks[0]['pose'] == "broken"
    assert "InvalidPoseError" in report.failed_tasks[0]['error']

    assert load_bvh(out / "a.bvh").num_joints == 22
    assert (out / "b.bvh").exists()
    assert not (out / "more").exists()

    saved = json.loads((out / "conversion_report.json").read_text())
    assert saved['successful'] == 2


def test_batch_skips_existing_outputs(pose_dir, tmp_path):
    out = tmp_path / "bvh"
    BatchConverter(pose_dir, out).run(progress=False)
    report = BatchConverter(pose_dir, out).run(progress=False)

    assert report.skipped == 2
    assert report.successful == 0

    forced = BatchConverter(pose_dir, out, force=True).run(progress=False)
    assert forced.skipped == 0
    assert forced.successful == 2


def test_batch_recursive_mirrors_directories(pose_dir, tmp_path):
    out = tmp_path / "bvh"
    report = BatchConverter(pose_dir, out, recursive=True).run(progress=False)

    assert report.successful == 3
    assert (out / "more" / "c.bvh").exists()


def test_dry_run_writes_nothing(pose_dir, tmp_path):
    out = tmp_path / "bvh"
    report = BatchConverter(pose_dir, out).run(dry_run=True)

    assert report.total_tasks == 3
    assert not out.exists()


def test_validate_bvh_file(tmp_path):
    assert validate_bvh_file(tmp_path / "missing.bvh")[0] is False

    empty = tmp_path / "empty.bvh"
    empty.write_text("")
    assert validate_bvh_file(empty) == (False, "File is empty", 0)

    junk = tmp_path / "junk.bvh"
    junk.write_text("HIERARCHY only")
    assert validate_bvh_file(junk)[0] is False


def test_batch_cli_exits_on_failures(pose_dir, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(pose_dir), "-o", str(tmp_path / "bvh"), "--no-progress"])
    assert excinfo.value.code == 1
