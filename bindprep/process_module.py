"""Command-line entry point: classify and enrich one Qt module's declarations."""

import argparse
import logging
import sys
from pathlib import Path

from bindprep.errors import PipelineError
from bindprep.run_pipeline import run_pipeline


def main() -> int:
    """Run the module processing pipeline."""
    ap = argparse.ArgumentParser(
        description=(
            "Classify, normalize and document the parsed declarations of a Qt "
            "module before binding emission."
        ),
    )
    ap.add_argument(
        "tree",
        type=Path,
        help="Declaration dump written by the parser (YAML or JSON)",
    )
    ap.add_argument(
        "out_dir",
        type=Path,
        help="Output directory for the processed tree and the run report",
    )
    ap.add_argument("--config", help="Path to configuration file")
    ap.add_argument("--library", help="Qt library file name, e.g. Qt5Core")
    ap.add_argument("--include-path", dest="include_path", help="Qt include directory")
    ap.add_argument("--library-path", dest="library_path", help="Qt library directory")
    ap.add_argument(
        "--platform",
        choices=["linux", "macos", "windows"],
        help="Target platform (default: the host platform)",
    )
    ap.add_argument("--docs", help="Directory holding the documentation corpus")
    ap.add_argument(
        "--request-inlines",
        action="store_true",
        help="Record the inlines shim build request in the report",
    )
    ap.add_argument(
        "--build-inlines",
        action="store_true",
        help="Build the inlines shim with qmake and make after processing",
    )
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Run every pass and write the report, but not the processed tree",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run_pipeline(args)
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
