"""
BVH (BioVision Hierarchy) file writer.

Writes the fixed VRoid skeleton and a single motion frame to BVH format.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import List, Union

from .config import ConversionConfig, ROOT_CHANNELS, JOINT_CHANNELS
from .data_structs import Joint, MotionFrame, Pose
from .rot_converter import RotationConverter

logger = logging.getLogger(__name__)


def format_number(value) -> str:
    """
    Shortest text for a number, written the way JavaScript prints it.

    Integral values lose their decimal point; magnitudes below 1e-6 or from
    1e21 up use exponent notation without zero padding (1e-7, 1e+21).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, int) and abs(value) < 1e21:
        return str(value)

    value = float(value)
    if value == 0:
        return "0"
    if not math.isfinite(value):
        return str(value)

    text = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        text = format(Decimal(text), 'f')
        if '.' in text:
            text = text.rstrip('0').rstrip('.')
        return text

    mantissa, exponent = text.split('e')
    exponent = int(exponent)
    return f"{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def format_fixed(value, precision: int) -> str:
    """
    Fixed-point text with ties rounded away from zero.

    Negative zero is written without its sign; small negatives that round
    to zero keep it ("-0.000").
    """
    value = float(value)
    if value == 0:
        value = 0.0
    if not math.isfinite(value):
        return str(value)
    quantum = Decimal(1).scaleb(-precision)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), 'f')


class BVHWriter:
    """Writer for single-frame BVH files"""

    def __init__(self, pose: Pose, config: ConversionConfig = None):
        self.pose = pose
        self.config = config or ConversionConfig()
        self.rot_converter = RotationConverter(self.config)

    def _root(self) -> Joint:
        for joint in self.config.skeleton:
            if joint.is_root:
                return joint
        raise ValueError("Skeleton has no root joint")

    def _children_of(self, name: str) -> List[Joint]:
        """Children in skeleton table order"""
        return [j for j in self.config.skeleton if j.parent == name]

    def _offset_line(self, joint: Joint, indent: str) -> str:
        ox, oy, oz = (format_number(v) for v in joint.offset)
        return f"{indent}  OFFSET {ox} {oy} {oz}"

    def hierarchy_lines(self) -> List[str]:
        """Render the HIERARCHY section"""
        root = self._root()
        lines = ["HIERARCHY", f"ROOT {root.name}", "{"]
        lines.append(self._offset_line(root, ""))
        lines.append(f"  CHANNELS 6 {ROOT_CHANNELS}")
        for child in self._children_of(root.name):
            lines.extend(self._joint_lines(child, 1))
        lines.append("}")
        return lines

    def _joint_lines(self, joint: Joint, depth: int) -> List[str]:
        """Render a joint block and its children"""
        indent = "  " * depth
        lines = [
            f"{indent}JOINT {joint.name}",
            f"{indent}{{",
            self._offset_line(joint, indent),
            f"{indent}  CHANNELS 3 {JOINT_CHANNELS}",
        ]
        for child in self._children_of(joint.name):
            lines.extend(self._joint_lines(child, depth + 1))
        lines.append(f"{indent}}}")
        return lines

    def _format_angle(self, value: float) -> str:
        return format_fixed(value, self.config.precision)

    def motion_values(self, frame: MotionFrame) -> List[str]:
        """Channel values of a frame: root position, then ZXY rotations per bone"""
        values = [format_number(v) for v in frame.root_position]
        for rotations in frame.joint_data.values():
            values.extend(self._format_angle(v) for v in rotations)
        return values

    def motion_lines(self) -> List[str]:
        """Render the MOTION section"""
        frame = self.rot_converter.build_frame(self.pose)
        return [
            "MOTION",
            "Frames: 1",
            f"Frame Time: {self.config.frame_time}",
            " ".join(self.motion_values(frame)),
        ]

    def to_string(self) -> str:
        """Full BVH document, newline-joined without a trailing newline"""
        return "\n".join(self.hierarchy_lines() + self.motion_lines())

    def write(self, filepath: Union[str, Path]) -> Path:
        """Write BVH file; the document is rendered before the file is opened."""
        content = self.to_string()
        filepath = Path(filepath)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(content)
        logger.debug(f"Wrote {len(content)} bytes to {filepath}")
        return filepath
