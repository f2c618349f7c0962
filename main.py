"""Main orchestration script: parse a Qt module's headers, then process the declarations."""

import argparse
import shlex
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> None:
    """Run the parse and process steps for one module."""
    parser = argparse.ArgumentParser(
        description="Parse a Qt module and prepare its declarations for binding."
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the module configuration file",
    )
    parser.add_argument(
        "--parser-cmd",
        help=(
            "External parser command writing the declaration dump; '{out}' is "
            "replaced with the dump path. Skipped when omitted."
        ),
    )
    parser.add_argument(
        "--out-dir",
        default="bindings_out",
        help="Output directory (default: bindings_out)",
    )
    parser.add_argument(
        "--build-inlines",
        action="store_true",
        help="Build the inlines shim library after processing",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Process and report without writing the declaration tree",
    )
    args = parser.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    dump_path = out_dir / "declarations.yml"

    # 1. Parse headers with the external parser
    if args.parser_cmd:
        print("--- Step 1: Parsing module headers ---")
        cmd = [part.replace("{out}", str(dump_path)) for part in shlex.split(args.parser_cmd)]
        run_command(cmd)
    else:
        print("--- Step 1: Skipped (using existing declaration dump) ---")

    # 2. Classify and enrich the declarations
    print("\n--- Step 2: Processing declarations ---")
    cmd = [
        sys.executable,
        "-m",
        "bindprep.process_module",
        str(dump_path),
        str(out_dir),
        "--config",
        args.config,
        "--request-inlines",
    ]
    if args.build_inlines:
        cmd.append("--build-inlines")
    if args.dry_run:
        cmd.append("--dry-run")

    run_command(cmd)

    print(f"\nSUCCESS: Processed declarations written to {out_dir}")


if __name__ == "__main__":
    main()
