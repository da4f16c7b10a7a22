#!/usr/bin/env python3
"""
Batch VRoid pose to BVH Converter

Converts every .vroidpose document in a directory to BVH using parallel
workers. A document that fails to convert is reported, not fatal.

Usage:
    python -m vroid2bvh.batch poses/ -o bvh/
    python -m vroid2bvh.batch poses/ -o bvh/ --workers 8 --recursive --dry-run
"""

import argparse
import json
import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tqdm import tqdm

from .config import ConversionConfig
from .bvh_parser import BVHParser
from .main import VroidPoseToBVH, setup_logging

# Configure module logger
logger = logging.getLogger(__name__)

POSE_PATTERN = "*.vroidpose"


@dataclass
class ConversionTask:
    """Represents a single conversion task."""
    input_path: Path
    output_path: Path

    @property
    def pose_name(self) -> str:
        return self.input_path.stem


@dataclass
class ConversionResult:
    """Result of a conversion operation."""
    task: ConversionTask
    success: bool
    error: Optional[str] = None
    duration_seconds: float = 0.0
    output_size_bytes: int = 0
    joint_count: int = 0


@dataclass
class BatchConversionReport:
    """Summary report of batch conversion."""
    start_time: str
    end_time: str
    duration_seconds: float
    total_tasks: int
    successful: int
    failed: int
    skipped: int
    total_output_bytes: int
    failed_tasks: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


def validate_bvh_file(filepath: Path, expected_joints: int = 0) -> Tuple[bool, str, int]:
    """
    Validate a written BVH file by reading it back.

    Returns:
        Tuple of (is_valid, error_message, joint_count)
    """
    if not filepath.exists():
        return False, "File does not exist", 0

    if filepath.stat().st_size == 0:
        return False, "File is empty", 0

    try:
        data = BVHParser(filepath).parse()
    except (OSError, ValueError) as e:
        return False, f"Cannot parse file: {e}", 0

    if data.frame_count != 1 or data.motion_data.shape[0] != 1:
        return False, f"Expected 1 frame, found {data.motion_data.shape[0]}", data.num_joints
    if expected_joints and data.num_joints != expected_joints:
        return False, f"Expected {expected_joints} joints, found {data.num_joints}", data.num_joints

    return True, "", data.num_joints


class BatchConverter:
    """
    Batch converter for .vroidpose to BVH conversion.

    Features:
    - Parallel processing with configurable workers
    - Per-file error isolation
    - Resume support (skip existing files)
    - Verification of output files
    """

    def __init__(
        self,
        input_dir: Path,
        output_dir: Path,
        config: ConversionConfig = None,
        max_workers: int = 4,
        force: bool = False,
        verify: bool = True,
        recursive: bool = False,
    ):
        """
        Initialize the batch converter.

        Args:
            input_dir: Directory containing .vroidpose files
            output_dir: Directory to write BVH files
            config: ConversionConfig shared by every conversion
            max_workers: Maximum parallel conversion workers
            force: Force reconversion even if output exists
            verify: Verify output files after conversion
            recursive: Also search subdirectories, mirroring them in the output
        """
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.config = config or ConversionConfig()
        self.max_workers = max_workers
        self.force = force
        self.verify = verify
        self.recursive = recursive

        logger.info(f"BatchConverter initialized: input={input_dir}, output={output_dir}")

    def find_inputs(self) -> List[Path]:
        """All pose files under the input directory, sorted."""
        if not self.input_dir.is_dir():
            logger.error(f"Input directory does not exist: {self.input_dir}")
            return []
        pattern = f"**/{POSE_PATTERN}" if self.recursive else POSE_PATTERN
        return sorted(p for p in self.input_dir.glob(pattern) if p.is_file())

    def discover_tasks(self, inputs: Optional[List[Path]] = None) -> List[ConversionTask]:
        """
        Build conversion tasks for the pose files found.

        Args:
            inputs: Pose files to consider; defaults to find_inputs()

        Returns:
            List of ConversionTask objects
        """
        tasks = []
        if inputs is None:
            inputs = self.find_inputs()

        for input_path in inputs:
            relative = input_path.relative_to(self.input_dir)
            output_path = (self.output_dir / relative).with_suffix('.bvh')

            # Skip if output exists and not forcing
            if not self.force and output_path.exists():
                logger.debug(f"Skipping {input_path.name}: output exists")
                continue

            tasks.append(ConversionTask(input_path=input_path, output_path=output_path))

        logger.info(f"Discovered {len(tasks)} conversion tasks")
        return tasks

    def convert_single(self, task: ConversionTask) -> ConversionResult:
        """
        Convert a single pose file to BVH.

        Args:
            task: ConversionTask to process

        Returns:
            ConversionResult with status
        """
        start_time = time.time()

        try:
            task.output_path.parent.mkdir(parents=True, exist_ok=True)

            converter = VroidPoseToBVH(self.config)
            converter.convert(task.input_path, task.output_path)

            duration = time.time() - start_time
            output_size = task.output_path.stat().st_size
            joint_count = len(self.config.skeleton)

            if self.verify:
                is_valid, error, joint_count = validate_bvh_file(
                    task.output_path, expected_joints=len(self.config.skeleton)
                )
                if not is_valid:
                    return ConversionResult(
                        task=task,
                        success=False,
                        error=f"Verification failed: {error}",
                        duration_seconds=duration,
                    )

            return ConversionResult(
                task=task,
                success=True,
                duration_seconds=duration,
                output_size_bytes=output_size,
                joint_count=joint_count,
            )

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"{type(e).__name__}: {str(e)}"
            logger.error(f"Failed to convert {task.input_path.name}: {error_msg}")

            return ConversionResult(
                task=task,
                success=False,
                error=error_msg,
                duration_seconds=duration,
            )

    def convert_all(
        self,
        tasks: List[ConversionTask],
        progress: bool = True,
    ) -> List[ConversionResult]:
        """
        Convert all tasks in parallel.

        Args:
            tasks: List of conversion tasks
            progress: Show progress bar

        Returns:
            List of ConversionResult objects, in completion order
        """
        if not tasks:
            logger.info("No tasks to convert")
            return []

        results = []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_task = {
                executor.submit(self.convert_single, task): task
                for task in tasks
            }

            pbar = tqdm(
                total=len(tasks),
                desc="Converting",
                unit="file",
                ncols=80,
                disable=not progress,
            )

            for future in as_completed(future_to_task):
                results.append(future.result())
                pbar.update(1)

            pbar.close()

        return results

    def generate_report(
        self,
        results: List[ConversionResult],
        start_time: datetime,
        end_time: datetime,
        skipped_count: int = 0,
    ) -> BatchConversionReport:
        """Generate summary report from results."""
        successful = sum(1 for r in results if r.success)
        failed = sum(1 for r in results if not r.success)
        total_bytes = sum(r.output_size_bytes for r in results if r.success)

        failed_tasks = [
            {
                'pose': r.task.pose_name,
                'input': str(r.task.input_path),
                'error': r.error,
            }
            for r in results if not r.success
        ]

        return BatchConversionReport(
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
            duration_seconds=(end_time - start_time).total_seconds(),
            total_tasks=len(results) + skipped_count,
            successful=successful,
            failed=failed,
            skipped=skipped_count,
            total_output_bytes=total_bytes,
            failed_tasks=failed_tasks,
        )

    def save_report(self, report: BatchConversionReport, filepath: Path):
        """Save report to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(report.to_dict(), f, indent=2)
        logger.info(f"Report saved to {filepath}")

    def run(self, dry_run: bool = False, progress: bool = True) -> BatchConversionReport:
        """
        Run the full batch conversion pipeline.

        Args:
            dry_run: Only discover tasks, don't convert
            progress: Show progress bar

        Returns:
            BatchConversionReport with results
        """
        start_time = datetime.now()

        print("=" * 60)
        print("VRoid Pose to BVH Batch Converter")
        print("=" * 60)
        print(f"Input:  {self.input_dir}")
        print(f"Output: {self.output_dir}")
        print(f"Strict: {self.config.strict}")
        print()

        inputs = self.find_inputs()
        tasks = self.discover_tasks(inputs)
        skipped_count = len(inputs) - len(tasks)

        print(f"Found {len(inputs)} pose files")
        print(f"  To convert: {len(tasks)}")
        print(f"  Skipped (already exist): {skipped_count}")

        if dry_run or not tasks:
            if dry_run:
                print("\n[DRY RUN] No conversions performed.")
                for task in tasks[:20]:
                    print(f"  {task.input_path} -> {task.output_path}")
                if len(tasks) > 20:
                    print(f"  ... and {len(tasks) - 20} more")
            else:
                print("\nNo files to convert.")
            report = self.generate_report([], start_time, datetime.now(), skipped_count)
            report.total_tasks = len(inputs)
            return report

        self.output_dir.mkdir(parents=True, exist_ok=True)
        results = self.convert_all(tasks, progress=progress)

        end_time = datetime.now()
        report = self.generate_report(results, start_time, end_time, skipped_count)

        print()
        print("=" * 60)
        print("Conversion Summary")
        print("=" * 60)
        print(f"  Duration:   {report.duration_seconds:.1f}s")
        print(f"  Successful: {report.successful}")
        print(f"  Failed:     {report.failed}")
        print(f"  Skipped:    {report.skipped}")

        if report.failed_tasks:
            print(f"\nFailed conversions ({len(report.failed_tasks)}):")
            for ft in report.failed_tasks[:10]:
                print(f"  {ft['pose']}: {ft['error']}")
            if len(report.failed_tasks) > 10:
                print(f"  ... and {len(report.failed_tasks) - 10} more")

        report_path = self.output_dir / "conversion_report.json"
        self.save_report(report, report_path)
        print(f"\nReport saved to: {report_path}")

        return report


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog='vroid2bvh-batch',
        description='Batch convert .vroidpose files to BVH format',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s poses/ -o bvh/

  # Include subdirectories and reconvert everything
  %(prog)s poses/ -o bvh/ --recursive --force

  # Dry run to see what would be converted
  %(prog)s poses/ -o bvh/ --dry-run
        """
    )

    parser.add_argument('input_dir', help='Directory containing .vroidpose files')
    parser.add_argument('-o', '--output', required=True,
                        help='Output directory for BVH files')
    parser.add_argument('-w', '--workers', type=int, default=4,
                        help='Number of parallel workers (default: 4)')
    parser.add_argument('-r', '--recursive', action='store_true',
                        help='Search subdirectories too')
    parser.add_argument('--strict', action='store_true',
                        help='Fail poses that miss mapped bones')
    parser.add_argument('--force', action='store_true',
                        help='Force reconversion even if output exists')
    parser.add_argument('--dry-run', action='store_true',
                        help='Only show what would be converted, do not process')
    parser.add_argument('--no-verify', action='store_true',
                        help='Skip verification of output BVH files')
    parser.add_argument('--no-progress', action='store_true',
                        help='Hide the progress bar')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    log_file = Path(args.output) / "batch_conversion.log" if not args.dry_run else None
    setup_logging(log_level, log_file)

    config = ConversionConfig()
    config.strict = args.strict

    converter = BatchConverter(
        input_dir=Path(args.input_dir),
        output_dir=Path(args.output),
        config=config,
        max_workers=args.workers,
        force=args.force,
        verify=not args.no_verify,
        recursive=args.recursive,
    )

    report = converter.run(dry_run=args.dry_run, progress=not args.no_progress)

    # Exit with error code if there were failures
    if report.failed > 0:
        sys.exit(1)


if __name__ == '__main__':
    main()
