#!/usr/bin/env python3
"""VidScribe main entry point: transcribe videos and burn the subtitles in."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from vidscribe.__version__ import __version__
from vidscribe.config.settings import (
    DEFAULT_MODEL_VARIANT,
    MODEL_VARIANTS,
    OUTPUT_TO_SOURCE,
    PipelineSettings,
)
from vidscribe.errors import PathError, SetupError, describe_exception
from vidscribe.modules.media_discovery import MediaDiscovery
from vidscribe.pipelines.task import BatchJob, BatchResult
from vidscribe.pipelines.video_pipeline import VideoPipeline
from vidscribe.utils.async_processor import DEFAULT_MAX_WORKERS, BatchCoordinator
from vidscribe.utils.logger import logger, setup_logger
from vidscribe.utils.preflight_check import ensure_ready, run_preflight_checks
from vidscribe.utils.progress_display import DummyProgress, ProgressDisplay
from vidscribe.utils.workspace import Workspace

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="vidscribe",
        description="VidScribe - transcribe videos with Gemini and burn the subtitles into a copy",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Core arguments
    parser.add_argument("-i", "--input", required=False,
                        help="Input video file, or a directory to search recursively")
    parser.add_argument("--model", choices=list(MODEL_VARIANTS), default=DEFAULT_MODEL_VARIANT,
                        help=f"Underlying Gemini model to use (default: {DEFAULT_MODEL_VARIANT})")

    # Environment check
    parser.add_argument("--check", action="store_true", help="Run environment checks and exit")
    parser.add_argument("--check-verbose", action="store_true", help="Run verbose environment checks")

    # Path and logging
    path_group = parser.add_argument_group("Path and Logging Options")
    path_group.add_argument("--output-dir", default=OUTPUT_TO_SOURCE,
                            help="Where transcribed videos go: 'source' (next to each video, default) or a directory")
    path_group.add_argument("--temp-dir", default=None, help="Parent directory for the temporary workspace")
    path_group.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                            default="INFO", help="Logging level")
    path_group.add_argument("--log-file", help="Log file path")
    path_group.add_argument("--stats-file", help="Save per-file results to JSON")

    # Processing
    processing_group = parser.add_argument_group("Processing Options")
    processing_group.add_argument("--max-workers", type=_positive_int, default=DEFAULT_MAX_WORKERS,
                                  help=f"Videos processed concurrently (default: {DEFAULT_MAX_WORKERS})")
    processing_group.add_argument("--no-progress", action="store_true", help="Disable the progress bar")

    parser.add_argument("--version", action="version", version=f"VidScribe {__version__}")

    args = parser.parse_args(argv)
    if not (args.check or args.check_verbose) and not args.input:
        parser.error("the following arguments are required: -i/--input")
    return args


def build_settings(args: argparse.Namespace) -> PipelineSettings:
    return PipelineSettings.build(
        model_variant=args.model,
        output_dir=args.output_dir,
        max_workers=args.max_workers,
        temp_dir=args.temp_dir,
        show_progress=not args.no_progress,
    )


def process_job(job: BatchJob,
                settings: PipelineSettings,
                api_key: Optional[str] = None,
                **stage_overrides) -> BatchResult:
    """
    Run every video of ``job`` inside one workspace and return the batch result.

    ``stage_overrides`` are passed to VideoPipeline (audio_extractor,
    transcriber, formatter, burner, placer).
    """
    if settings.show_progress and len(job) > 0:
        progress = ProgressDisplay(total_files=len(job))
    else:
        progress = DummyProgress()

    with Workspace(parent_dir=settings.temp_dir) as workspace:
        pipeline = VideoPipeline(
            workspace=workspace,
            settings=settings,
            api_key=api_key,
            job_root=job.root if job.is_directory else None,
            **stage_overrides
        )
        with pipeline:
            coordinator = BatchCoordinator(
                pipeline,
                max_workers=settings.max_workers,
                progress=progress,
            )
            return coordinator.run(job)


def print_summary(result: BatchResult):
    """Print the batch summary line followed by every failure."""
    print(result.summary_line())
    if result.failures:
        print("Failed files:")
        for failure in result.failures:
            print(f"  - {failure.describe()}")
    if result.cancelled:
        print("Batch was cancelled after a fatal error; see the failures above.")


def write_stats(result: BatchResult, stats_file: str):
    """Save per-file results as JSON."""
    stats = {
        "total": result.total,
        "successful": result.success_count,
        "failed": result.failed_count,
        "elapsed_seconds": round(result.elapsed_seconds, 3),
        "files": [task.to_dict() for task in sorted(result.tasks, key=lambda t: t.index)],
    }
    stats_path = Path(stats_file)
    stats_path.parent.mkdir(parents=True, exist_ok=True)
    with open(stats_path, 'w', encoding='utf-8') as f:
        json.dump(stats, f, indent=2, ensure_ascii=False)
    print(f"Statistics saved to: {stats_path}")


def run(args: argparse.Namespace, **stage_overrides) -> int:
    """Execute a parsed command line and return the process exit code."""
    try:
        settings = build_settings(args)
        api_key = ensure_ready()
        discovery = MediaDiscovery(settings.video_extensions)
        job = discovery.resolve(args.input)
    except (SetupError, PathError) as e:
        logger.error(str(e))
        return EXIT_FAILURE

    result = process_job(job, settings, api_key, **stage_overrides)

    if args.stats_file:
        write_stats(result, args.stats_file)

    if not job.is_directory:
        if result.failures:
            failure = result.failures[0]
            print(f"Error: {failure.stage.label} failed for {failure.source}: "
                  f"{describe_exception(failure.error.cause)}", file=sys.stderr)
            return EXIT_FAILURE
        print(f"Transcribed video saved to: {result.outputs[0]}")
        return EXIT_OK

    print_summary(result)
    return EXIT_OK if result.all_succeeded else EXIT_FAILURE


def main(argv: Optional[List[str]] = None):
    """Console entry point."""
    args = parse_arguments(argv)

    setup_logger("vidscribe", args.log_level, args.log_file)

    if args.check or args.check_verbose:
        ok = run_preflight_checks(verbose=args.check_verbose)
        sys.exit(EXIT_OK if ok else EXIT_FAILURE)

    try:
        exit_code = run(args)
    except KeyboardInterrupt:
        logger.warning("Processing interrupted by user")
        exit_code = EXIT_INTERRUPTED

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
