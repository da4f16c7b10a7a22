"""
Main converter module for VRoid pose to BVH conversion.

Provides the VroidPoseToBVH converter class and the command-line interface
for turning a .vroidpose document into a one-frame BVH file.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import ConversionConfig, DEFAULT_FRAME_TIME
from .pose_loader import PoseLoader
from .bvh_writer import BVHWriter

logger = logging.getLogger(__name__)


class VroidPoseToBVH:
    """Main converter class for .vroidpose to BVH conversion"""

    def __init__(self, config: ConversionConfig = None):
        self.config = config or ConversionConfig()
        self.loader = PoseLoader(self.config)

    def convert_text(self, text: Union[str, bytes], source: str = "<string>") -> str:
        """Convert a .vroidpose document held in memory to BVH text."""
        pose = self.loader.loads(text, source=source)
        return BVHWriter(pose, self.config).to_string()

    def convert(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> Path:
        """Convert a .vroidpose file to a BVH file."""
        logger.info(f"Parsing pose: {input_path}")
        pose = self.loader.load(input_path)

        logger.info(f"Writing BVH: {output_path}")
        writer = BVHWriter(pose, self.config)
        return writer.write(output_path)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
):
    """Configure logging for the converter."""
    handlers = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='vroid2bvh',
        description='Convert a VRoid Studio pose (.vroidpose) to a one-frame BVH',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s input.vroidpose out.bvh

  # Fail on bones missing from the pose instead of zero-filling them
  %(prog)s input.vroidpose out.bvh --strict
        """
    )

    parser.add_argument('input', help='Input .vroidpose file')
    parser.add_argument('output', help='Output BVH file')
    parser.add_argument('--strict', action='store_true',
                        help='Error on mapped bones missing from the pose')
    parser.add_argument('--frame-time', type=float, default=DEFAULT_FRAME_TIME,
                        help=f'Frame Time header value (default: {DEFAULT_FRAME_TIME})')
    parser.add_argument('--precision', type=int, default=3,
                        help='Decimal places for rotation values (default: 3)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')
    return parser


def main(argv: Optional[List[str]] = None):
    """Command-line interface for .vroidpose to BVH conversion"""
    args = build_parser().parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    config = ConversionConfig()
    config.strict = args.strict
    config.frame_time = args.frame_time
    config.precision = args.precision

    converter = VroidPoseToBVH(config)
    output_path = converter.convert(args.input, args.output)

    print(f"Exported BVH -> {output_path}")


if __name__ == '__main__':
    main()
