"""Command-line interface for the xcode test engine."""

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Sequence

from xcode_test_engine.config import CONFIG_FILE
from xcode_test_engine.core import XcodeTestEngine
from xcode_test_engine.exceptions import ConfigurationError, XcodeTestEngineError
from xcode_test_engine.models.data_models import CoverageMode, ResultKind, ResultRecord
from xcode_test_engine.utils.user_feedback import UserFeedback

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


# Configure logging
def configure_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging based on verbosity level."""
    if quiet:
        logging.basicConfig(level=logging.ERROR, format='%(message)s')
    elif verbose:
        # Full logging with timestamps in verbose mode
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        # Clean logging - only show warnings and errors
        logging.basicConfig(
            level=logging.WARNING,
            format='%(levelname)s: %(message)s'
        )

logger = logging.getLogger(__name__)


def setup_argparse() -> argparse.ArgumentParser:
    """Set up command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Build, run, and interpret xcodebuild unit tests and coverage",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "paths",
        nargs='*',
        help="Changed paths that should be tested; ignored with --everything"
    )
    parser.add_argument(
        "--directory",
        default=".",
        help="Project root containing the configuration file (default: current directory)"
    )
    parser.add_argument(
        "--config",
        default=CONFIG_FILE,
        help=f"Configuration file relative to the project root (default: {CONFIG_FILE})"
    )

    coverage = parser.add_mutually_exclusive_group()
    coverage.add_argument(
        "--coverage",
        dest="coverage",
        action="store_true",
        default=None,
        help="Always extract coverage when the configuration allows it"
    )
    coverage.add_argument(
        "--no-coverage",
        dest="coverage",
        action="store_false",
        default=None,
        help="Never extract coverage"
    )

    parser.add_argument(
        "--everything",
        action="store_true",
        help="Run all tests regardless of the given paths"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON on stdout"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Minimal output mode - only show results and errors"
    )

    return parser


def exit_code_for(records: Sequence[ResultRecord]) -> int:
    """0 when every record passed or was skipped, 1 otherwise."""
    ok = (ResultKind.PASS, ResultKind.SKIP)
    return EXIT_OK if all(record.result in ok for record in records) else EXIT_FAILURES


def report_results(records: List[ResultRecord], args, feedback: UserFeedback) -> None:
    if args.json:
        json.dump([record.to_dict() for record in records], sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if not records:
        feedback.info("No tests to run.")
        return

    feedback.results_table(records)
    counts = {kind.value.title(): sum(1 for r in records if r.result is kind) for kind in ResultKind}
    counts = {k: v for k, v in counts.items() if v}
    style = "green" if exit_code_for(records) == EXIT_OK else "red"
    feedback.summary_panel("Summary", counts, style)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main execution function; returns the process exit code."""
    feedback = None

    try:
        parser = setup_argparse()
        args = parser.parse_args(argv)

        feedback = UserFeedback(verbose=args.verbose, quiet=args.quiet)
        configure_logging(verbose=args.verbose, quiet=args.quiet)

        engine = XcodeTestEngine(
            project_root=Path(args.directory).resolve(),
            coverage_requested=CoverageMode.from_flag(args.coverage),
            run_all_tests=args.everything,
            paths=args.paths,
            config_file=args.config,
            feedback=feedback,
        )
        records = engine.run()
        report_results(records, args, feedback)
        return exit_code_for(records)

    except KeyboardInterrupt:
        if feedback:
            feedback.warning("Operation cancelled by user")
        else:
            print("\nOperation cancelled by user")
        return EXIT_INTERRUPTED

    except ConfigurationError as e:
        feedback.error(e.message, e.suggestion)
        return EXIT_USAGE

    except (XcodeTestEngineError, TimeoutError) as e:
        feedback.error(getattr(e, 'message', str(e)), getattr(e, 'suggestion', None))
        if feedback.verbose:
            logger.error(f"Error details: {e}")
        return EXIT_FAILURES

    except Exception as e:
        if feedback:
            feedback.error(f"Unexpected error: {e}",
                           "This appears to be a bug. Please report it with the details below.")
            if feedback.verbose:
                feedback.error("Full traceback:", details=traceback.format_exc())
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
