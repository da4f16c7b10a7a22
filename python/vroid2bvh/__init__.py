"""
VRoid Pose to BVH Converter Package

Converts a single VRoid Studio pose (.vroidpose) into a one-frame BVH file:
- Fixed 22-joint humanoid skeleton rooted at the hips
- ZXY rotation channels, hips translation on the root
- Bones missing from the pose are written as zero rotation
"""

from .data_structs import Joint, BoneRotation, Pose, MotionFrame
from .config import ConversionConfig
from .quat_math import QuaternionMath
from .pose_loader import PoseLoader, InvalidPoseError
from .rot_converter import RotationConverter, MissingBoneError
from .bvh_writer import BVHWriter
from .bvh_parser import BVHParser, BVHData, load_bvh
from .main import VroidPoseToBVH
# Note: batch module not imported here to avoid RuntimeWarning when running as -m

__version__ = "1.0.0"

__all__ = [
    # Data structures
    'Joint',
    'BoneRotation',
    'Pose',
    'MotionFrame',

    # Configuration
    'ConversionConfig',

    # Math utilities
    'QuaternionMath',

    # Loading
    'PoseLoader',
    'InvalidPoseError',

    # Converters
    'RotationConverter',
    'MissingBoneError',
    'VroidPoseToBVH',

    # Reading / writing
    'BVHWriter',
    'BVHParser',
    'BVHData',
    'load_bvh',
]
