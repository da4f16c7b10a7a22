"""
BVH Parser - reads BVH documents back into joints and motion data.

Used to verify converted files and to inspect the written hierarchy.
"""

import numpy as np
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Union


@dataclass
class BVHJoint:
    """Represents a single joint read from a BVH hierarchy."""
    name: str
    offset: np.ndarray
    channels: List[str]
    channel_indices: List[int] = field(default_factory=list)
    children: List['BVHJoint'] = field(default_factory=list)
    parent: Optional['BVHJoint'] = None

    @property
    def num_channels(self) -> int:
        return len(self.channels)

    @property
    def parent_name(self) -> Optional[str]:
        return self.parent.name if self.parent else None

    def get_rotation_order(self) -> str:
        """Extract rotation order from channels (e.g., 'ZXY')."""
        rot_channels = [c for c in self.channels if 'rotation' in c.lower()]
        return ''.join([c[0].upper() for c in rot_channels])


@dataclass
class BVHData:
    """
    Complete BVH document data.

    Attributes:
        root: Root joint of the skeleton hierarchy
        joints: Joint name -> BVHJoint, in hierarchy order
        frame_count: Number of motion frames declared in the header
        frame_time: Time per frame in seconds
        motion_data: Motion values (frames x channels)
    """
    root: BVHJoint
    joints: Dict[str, BVHJoint]
    frame_count: int
    frame_time: float
    motion_data: np.ndarray
    filename: str = ""

    @property
    def num_joints(self) -> int:
        return len(self.joints)

    @property
    def total_channels(self) -> int:
        return sum(j.num_channels for j in self.joints.values())

    def joint_values(self, name: str, frame_idx: int = 0) -> np.ndarray:
        """Channel values of one joint in one frame"""
        return self.motion_data[frame_idx, self.joints[name].channel_indices]


class BVHParser:
    """Pure Python parser for BVH documents."""

    def __init__(self, filepath: Union[str, Path, None] = None):
        self.filepath = Path(filepath) if filepath else None
        self.joints: Dict[str, BVHJoint] = {}
        self.channel_count = 0

    def parse(self) -> BVHData:
        """Parse the BVH file and return structured data."""
        with open(self.filepath, 'r') as f:
            content = f.read()
        return self.parse_text(content)

    def parse_text(self, content: str) -> BVHData:
        """Parse BVH content held in memory."""
        self.joints = {}
        self.channel_count = 0

        parts = content.split('MOTION')
        if len(parts) != 2:
            raise ValueError(f"Invalid BVH file format: {self.filepath or '<string>'}")

        root = self._parse_hierarchy(parts[0])
        if root is None:
            raise ValueError(f"BVH hierarchy has no ROOT: {self.filepath or '<string>'}")
        frame_count, frame_time, motion_data = self._parse_motion(parts[1])

        return BVHData(
            root=root, joints=self.joints, frame_count=frame_count,
            frame_time=frame_time, motion_data=motion_data,
            filename=self.filepath.name if self.filepath else "",
        )

    def _parse_hierarchy(self, content: str) -> Optional[BVHJoint]:
        lines = [l.strip() for l in content.split('\n') if l.strip()]
        root, joint_stack, current_joint = None, [], None

        for line in lines:
            tokens = line.split()

            if tokens[0] in ('ROOT', 'JOINT'):
                new_joint = BVHJoint(name=tokens[1], offset=np.zeros(3), channels=[])
                if tokens[0] == 'ROOT':
                    root = new_joint
                elif current_joint:
                    current_joint.children.append(new_joint)
                    new_joint.parent = current_joint
                self.joints[tokens[1]] = new_joint
                joint_stack.append(new_joint)
                current_joint = new_joint

            elif tokens[0] == 'OFFSET' and current_joint:
                current_joint.offset = np.array([float(t) for t in tokens[1:4]])

            elif tokens[0] == 'CHANNELS' and current_joint:
                n = int(tokens[1])
                current_joint.channels = tokens[2:2+n]
                current_joint.channel_indices = list(range(self.channel_count, self.channel_count + n))
                self.channel_count += n

            elif tokens[0] == '}' and joint_stack:
                joint_stack.pop()
                current_joint = joint_stack[-1] if joint_stack else None

        return root

    def _parse_motion(self, content: str) -> Tuple[int, float, np.ndarray]:
        lines = [l.strip() for l in content.split('\n') if l.strip()]
        frame_count, frame_time, motion_lines = 0, 0.0, []
        parsing_frames = False

        for line in lines:
            if line.startswith('Frames:'):
                frame_count = int(line.split(':')[1].strip())
            elif line.startswith('Frame Time:'):
                frame_time = float(line.split(':')[1].strip())
                parsing_frames = True
            elif parsing_frames:
                motion_lines.append([float(v) for v in line.split()])

        motion_data = np.array(motion_lines, dtype=np.float64).reshape(len(motion_lines), self.channel_count)
        return frame_count, frame_time, motion_data


def load_bvh(filepath: Union[str, Path]) -> BVHData:
    """Load and parse a BVH file."""
    return BVHParser(filepath).parse()
