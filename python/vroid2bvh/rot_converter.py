"""
Rotation conversion utilities for VRoid pose to BVH conversion.

Turns the source quaternion of each mapped bone into the three BVH
rotation channels (Zrotation Xrotation Yrotation).
"""

import logging
import numpy as np
from typing import Optional

from .config import ConversionConfig
from .data_structs import BoneRotation, MotionFrame, Pose
from .quat_math import QuaternionMath

logger = logging.getLogger(__name__)


class MissingBoneError(KeyError):
    """A mapped bone has no usable rotation while running in strict mode"""


class RotationConverter:
    """Handles rotation conversions for motion data"""

    def __init__(self, config: ConversionConfig = None):
        self.config = config or ConversionConfig()

    def convert_bone_rotation(self, rotation: Optional[BoneRotation]) -> np.ndarray:
        """
        Convert one source rotation to BVH channel values.

        1. Decompose the quaternion into XYZ Euler angles (degrees)
        2. Negate pitch and yaw to match the BVH rotation direction
        3. Reorder to the ZXY channel declaration

        Args:
            rotation: Source quaternion, or None for a missing bone

        Returns:
            Array [Zrot, Xrot, Yrot] in degrees; zeros for a missing bone
        """
        if rotation is None:
            return np.zeros(3)

        roll, pitch, yaw = QuaternionMath.quat_to_euler_xyz_deg(
            rotation.x, rotation.y, rotation.z, rotation.w
        )

        # Applied to every bone, head and neck included
        pitch = -pitch
        yaw = -yaw

        return np.array([yaw, roll, pitch])

    def build_frame(self, pose: Pose) -> MotionFrame:
        """
        Build the motion frame for a pose.

        Bones are visited in bone map order, independent of the order they
        appear in the document.

        Raises:
            MissingBoneError: strict mode and a mapped bone is absent or has no w
        """
        frame = MotionFrame(root_position=pose.root_position)

        for bone_name, joint_name in self.config.bone_map.items():
            rotation = pose.rotation(bone_name)
            if rotation is None:
                if self.config.strict:
                    raise MissingBoneError(f"No rotation for bone '{bone_name}' in {pose.source or 'pose'}")
                logger.debug(f"Bone {bone_name} missing, writing zero rotation")
            frame.joint_data[joint_name] = self.convert_bone_rotation(rotation)

        return frame
