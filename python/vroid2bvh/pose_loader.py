"""
VRoid pose (.vroidpose) loader.

Parses the JSON pose document written by VRoid Studio and returns a Pose
holding its bone definitions.
"""

import json
import logging
from pathlib import Path
from typing import Union

from .config import ConversionConfig
from .data_structs import Pose

logger = logging.getLogger(__name__)


class InvalidPoseError(ValueError):
    """Document parsed but carries no bone definitions"""


class PoseLoader:
    """Loader for .vroidpose documents"""

    def __init__(self, config: ConversionConfig = None):
        self.config = config or ConversionConfig()

    def loads(self, text: Union[str, bytes], source: str = "<string>") -> Pose:
        """
        Parse a .vroidpose document held in memory.

        Args:
            text: Document content
            source: Name used in log and error messages

        Returns:
            Pose with the document's bone definitions

        Raises:
            json.JSONDecodeError: Content is not JSON
            InvalidPoseError: The bone definition field is missing
        """
        document = json.loads(text)

        key = self.config.bone_definition_key
        bones = document.get(key) if isinstance(document, dict) else None
        if bones is None:
            raise InvalidPoseError(f"Invalid .vroidpose: no {key} found ({source})")

        logger.debug(f"Loaded {len(bones)} bone definitions from {source}")
        return Pose(bones=bones, position_key=self.config.position_key, source=source)

    def load(self, filepath: Union[str, Path]) -> Pose:
        """Parse a .vroidpose file."""
        filepath = Path(filepath)
        with open(filepath, 'r', encoding='utf-8-sig') as f:
            text = f.read()
        return self.loads(text, source=str(filepath))
