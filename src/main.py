# src/main.py — v2
"""CLI entry point: analyze and schedule commands.

Usage:
    cropwatch analyze <image> --crop tomato [--day 5] [--previous TEXT]
    cropwatch schedule <analysis.json> [--crop tomato]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from cropwatch.config.settings import ConfigurationError
from cropwatch.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        _setup_logging(args.verbose)
    except (ConfigurationError, ValidationError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="cropwatch",
        description=f"cropwatch v{__version__}: crop photo analysis and re-capture scheduling",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Analyze a crop photo and schedule the next one",
    )
    p_analyze.add_argument("image", type=Path, help="Path to JPEG photo")
    p_analyze.add_argument("--crop", required=True, help="Crop type (e.g. tomato)")
    p_analyze.add_argument(
        "--day", type=int, default=1,
        help="Days since planting (default: 1)",
    )
    p_analyze.add_argument(
        "--previous", default=None,
        help="Summary of the previous analysis",
    )
    p_analyze.add_argument(
        "--language", default="en", choices=["en", "hi", "mr"],
        help="Response language (default: en)",
    )
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- schedule ---
    p_schedule = subparsers.add_parser(
        "schedule", help="Recompute the schedule for a saved analysis",
    )
    p_schedule.add_argument("analysis", type=Path, help="Path to analysis JSON")
    p_schedule.add_argument("--crop", default=None, help="Crop type (logged only)")
    p_schedule.set_defaults(func=_cmd_schedule)

    return parser


async def _cmd_analyze(args: argparse.Namespace) -> int:
    """Run the full photo analysis pipeline."""
    from cropwatch.api.facade import CropAnalysisService
    from cropwatch.core.crops import SUPPORTED_CROPS, CropContext

    image_path: Path = args.image
    if not image_path.exists():
        logger.error("File not found: %s", image_path)
        return 1

    if args.crop.strip().lower() not in SUPPORTED_CROPS:
        logger.error(
            "Invalid crop type %r, expected one of: %s",
            args.crop, ", ".join(SUPPORTED_CROPS),
        )
        return 1

    crop = CropContext(crop_type=args.crop, day_number=max(1, args.day), language=args.language)
    service = CropAnalysisService()

    logger.info("Analyzing %s (%s, day %d)", image_path.name, crop.crop_type, crop.day_number)
    result = await service.analyze_growth_photo(
        image_path.read_bytes(), crop, previous_summary=args.previous,
    )
    print(json.dumps(result.to_response(), indent=2, ensure_ascii=False))
    return 0


async def _cmd_schedule(args: argparse.Namespace) -> int:
    """Normalize a saved analysis object and print its schedule."""
    from cropwatch.analysis.normalizer import normalize
    from cropwatch.analysis.scheduler import compute_schedule

    path: Path = args.analysis
    if not path.is_file():
        logger.error("File not found: %s", path)
        return 1

    result = normalize(path.read_text(encoding="utf-8"))
    if result.degraded:
        logger.warning("Analysis file could not be parsed, using fallback record")

    decision = compute_schedule(result.analysis, args.crop, result.analysis.growth_stage)
    print(json.dumps(decision.model_dump(mode="json", by_alias=True), indent=2))
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage from settings, -v forces DEBUG."""
    from cropwatch.config.settings import Settings
    from cropwatch.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
