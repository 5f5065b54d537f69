"""
Manual trigger for the release pipeline.

Re-runs the pipeline for a reference without a webhook delivery, e.g. after
a failed run has been cleaned up on GitHub:

    python -m app.cli --ref refs/tags/v8.12.0 --dry-run
"""

import argparse
import sys
from typing import List, Optional

from app.config import settings
from app.models.push_event import PushEvent, PushNotification
from app.services.release_pipeline import run_release_pipeline
from app.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Open a google-libphonenumber update pull request for a release tag"
    )
    parser.add_argument(
        "--ref",
        required=True,
        help="Pushed reference, e.g. refs/tags/v8.12.0",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Commit locally but skip push and pull request.",
    )
    parser.add_argument(
        "--keep-workspace",
        action="store_true",
        help="Do not delete temporary directories after the run.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.dry_run:
        overrides["push_enabled"] = False
    if args.keep_workspace:
        overrides["cleanup_workspace"] = False
    run_settings = settings.model_copy(update=overrides)

    setup_logging(args.log_level or run_settings.log_level)
    logger.info(f"Manual pipeline run for {args.ref}")

    notification = PushNotification(reference=args.ref, event=PushEvent(ref=args.ref))
    result = run_release_pipeline(notification, run_settings)
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
