"""
test_main.py - Converter facade and command-line interface

Usage:
    pytest python/tests/test_main.py
"""

import json

import pytest

from vroid2bvh.main import VroidPoseToBVH, main
from vroid2bvh.pose_loader import InvalidPoseError
from vroid2bvh.rot_converter import MissingBoneError


def test_convert_text():
    text = VroidPoseToBVH().convert_text('{"BoneDefinition": {"HipsPosition": {"x": 1, "y": 2, "z": 3}}}')
    assert text.startswith("HIERARCHY\n")
    assert text.split("\n")[-1].startswith("1 2 3 0.000 0.000 0.000")


def test_cli_converts_file(pose_file, tmp_path, capsys):
    src = pose_file({"Hips": {"x": 0, "y": 0, "z": 0, "w": 1}})
    out = tmp_path / "out.bvh"

    main([str(src), str(out)])

    assert out.exists()
    assert f"Exported BVH -> {out}" in capsys.readouterr().out


def test_cli_requires_two_arguments(pose_file, capsys):
    src = pose_file({})
    with pytest.raises(SystemExit) as excinfo:
        main([str(src)])

    assert excinfo.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_missing_bone_definition_writes_nothing(tmp_path):
    src = tmp_path / "bad.vroidpose"
    src.write_text(json.dumps({"Pose": {}}), encoding="utf-8")
    out = tmp_path / "out.bvh"

    with pytest.raises(InvalidPoseError):
        main([str(src), str(out)])
    assert not out.exists()


def test_malformed_document_propagates(tmp_path):
    src = tmp_path / "broken.vroidpose"
    src.write_text("not json", encoding="utf-8")

    with pytest.raises(json.JSONDecodeError):
        VroidPoseToBVH().convert(src, tmp_path / "out.bvh")
    assert not (tmp_path / "out.bvh").exists()


def test_missing_input_file_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        main([str(tmp_path / "nope.vroidpose"), str(tmp_path / "out.bvh")])


def test_cli_strict_flag(pose_file, tmp_path):
    src = pose_file({"Hips": {"x": 0, "y": 0, "z": 0, "w": 1}})
    out = tmp_path / "out.bvh"

    with pytest.raises(MissingBoneError):
        main([str(src), str(out), "--strict"])
    assert not out.exists()


def test_cli_frame_time_option(pose_file, tmp_path):
    src = pose_file({})
    out = tmp_path / "out.bvh"

    main([str(src), str(out), "--frame-time", "0.0416667"])

    assert "Frame Time: 0.0416667" in out.read_text(encoding="utf-8")
