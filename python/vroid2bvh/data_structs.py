"""
Data structures for VRoid pose to BVH conversion.

Contains dataclasses for the output skeleton joints, the source bone
rotations, the loaded pose and the single motion frame.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass
class Joint:
    """Represents a joint in the output skeleton hierarchy"""
    name: str
    parent: Optional[str] = None
    offset: Tuple[float, float, float] = (0, 0, 0)

    @property
    def is_root(self) -> bool:
        return self.parent is None


def _component(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    return 0.0 if value is None else float(value)


@dataclass
class BoneRotation:
    """Unit quaternion (x, y, z, w) of one source bone"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def from_dict(cls, data: Any) -> Optional['BoneRotation']:
        """
        Build a rotation from a document entry.

        Returns None when the entry is missing or has no ``w`` component;
        absent or null x/y/z components read as 0.
        """
        if not isinstance(data, dict) or data.get('w') is None:
            return None
        return cls(
            x=_component(data, 'x'),
            y=_component(data, 'y'),
            z=_component(data, 'z'),
            w=float(data['w']),
        )


@dataclass
class Pose:
    """Bone definitions of a single .vroidpose document"""
    bones: Dict[str, Any] = field(default_factory=dict)
    position_key: str = "HipsPosition"
    source: str = ""

    def rotation(self, bone_name: str) -> Optional[BoneRotation]:
        return BoneRotation.from_dict(self.bones.get(bone_name))

    @property
    def root_position(self) -> Tuple[Any, Any, Any]:
        """Hips translation as stored in the document, zero when absent"""
        pos = self.bones.get(self.position_key)
        if not isinstance(pos, dict):
            return (0, 0, 0)
        return tuple(0 if pos.get(axis) is None else pos[axis] for axis in ('x', 'y', 'z'))


@dataclass
class MotionFrame:
    """Represents the single frame of motion data"""
    root_position: Tuple[Any, Any, Any] = (0, 0, 0)
    # Joint name -> [Zrot, Xrot, Yrot] in degrees, in channel order
    joint_data: Dict[str, np.ndarray] = field(default_factory=dict)

    @property
    def channel_count(self) -> int:
        return 3 + 3 * len(self.joint_data)
