"""
Configuration classes for VRoid pose to BVH conversion.

Contains the conversion options, the fixed VRoid bone mapping and the
fixed 22-joint output skeleton.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .data_structs import Joint


# Root carries translation followed by the shared rotation order
ROOT_CHANNELS = "Xposition Yposition Zposition Zrotation Xrotation Yrotation"
JOINT_CHANNELS = "Zrotation Xrotation Yrotation"

DEFAULT_FRAME_TIME = 0.0333333


@dataclass
class ConversionConfig:
    """Configuration for the conversion process"""
    # Written verbatim as the "Frame Time:" header (30 fps)
    frame_time: float = DEFAULT_FRAME_TIME

    # Decimal places for rotation channel values
    precision: int = 3

    # Raise on missing bones instead of zero-filling them
    strict: bool = False

    # Field names inside the .vroidpose document
    bone_definition_key: str = "BoneDefinition"
    position_key: str = "HipsPosition"

    # Source bone -> BVH joint; iteration order is the motion channel order
    bone_map: Dict[str, str] = field(default_factory=lambda: ConversionConfig.vroid_bone_map())

    # Output skeleton, root first
    skeleton: List[Joint] = field(default_factory=lambda: ConversionConfig.vroid_skeleton())

    @staticmethod
    def vroid_bone_map() -> Dict[str, str]:
        """VRoid humanoid bone names to BVH joint names"""
        return {
            'Hips': 'hips',
            'Spine': 'spine',
            'Chest': 'chest',
            'UpperChest': 'upperChest',
            'Neck': 'neck',
            'Head': 'head',

            'LeftShoulder': 'leftShoulder',
            'LeftUpperArm': 'leftUpperArm',
            'LeftLowerArm': 'leftLowerArm',
            'LeftHand': 'leftHand',

            'RightShoulder': 'rightShoulder',
            'RightUpperArm': 'rightUpperArm',
            'RightLowerArm': 'rightLowerArm',
            'RightHand': 'rightHand',

            'LeftUpperLeg': 'leftUpperLeg',
            'LeftLowerLeg': 'leftLowerLeg',
            'LeftFoot': 'leftFoot',
            'LeftToes': 'leftToes',

            'RightUpperLeg': 'rightUpperLeg',
            'RightLowerLeg': 'rightLowerLeg',
            'RightFoot': 'rightFoot',
            'RightToes': 'rightToes',
        }

    @staticmethod
    def vroid_skeleton() -> List[Joint]:
        """Fixed output skeleton with static offsets in BVH units"""
        return [
            Joint('hips', None, (0, 0, 0)),
            Joint('spine', 'hips', (0, 10, 0)),
            Joint('chest', 'spine', (0, 10, 0)),
            Joint('upperChest', 'chest', (0, 10, 0)),
            Joint('neck', 'upperChest', (0, 10, 0)),
            Joint('head', 'neck', (0, 10, 0)),

            Joint('leftShoulder', 'upperChest', (2, 8, 0)),
            Joint('leftUpperArm', 'leftShoulder', (6, 0, 0)),
            Joint('leftLowerArm', 'leftUpperArm', (10, 0, 0)),
            Joint('leftHand', 'leftLowerArm', (8, 0, 0)),

            Joint('rightShoulder', 'upperChest', (-2, 8, 0)),
            Joint('rightUpperArm', 'rightShoulder', (-6, 0, 0)),
            Joint('rightLowerArm', 'rightUpperArm', (-10, 0, 0)),
            Joint('rightHand', 'rightLowerArm', (-8, 0, 0)),

            Joint('leftUpperLeg', 'hips', (4, -10, 0)),
            Joint('leftLowerLeg', 'leftUpperLeg', (0, -20, 0)),
            Joint('leftFoot', 'leftLowerLeg', (0, -8, 4)),
            Joint('leftToes', 'leftFoot', (0, 0, 4)),

            Joint('rightUpperLeg', 'hips', (-4, -10, 0)),
            Joint('rightLowerLeg', 'rightUpperLeg', (0, -20, 0)),
            Joint('rightFoot', 'rightLowerLeg', (0, -8, 4)),
            Joint('rightToes', 'rightFoot', (0, 0, 4)),
        ]
