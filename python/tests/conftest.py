import json

import pytest


def write_pose(path, bones):
    path.write_text(json.dumps({"BoneDefinition": bones}), encoding="utf-8")
    return path


@pytest.fixture
def pose_file(tmp_path):
    """Factory writing a .vroidpose document into tmp_path"""
    def _make(bones, name="pose.vroidpose"):
        return write_pose(tmp_path / name, bones)
    return _make
