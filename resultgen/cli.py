"""
Result Generator CLI

Computes totals, averages, grades and pass/fail status for a student roster
in parallel, ranks students by total (ties share a rank), prints a table and
writes the results to CSV.

Usage:
    resultgen                                  # interactive mode
    resultgen --input students.csv
    resultgen --input students.csv --output results.csv --threads 4
    resultgen -i students.csv --json data/results.json --excel result.xlsx

CSV format (header required):
    ID,Name,Math,Science,English,History,Geography
    S1,John Doe,85,78,92,66,81
    S2,Jane Smith,90,88,84,91,77
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from resultgen.config import DEFAULT_OUTPUT_CSV, MAX_MARK, MIN_MARK, PASS_MARK
from resultgen.export import save_excel, save_json, write_results_csv
from resultgen.ingestion.codec import FormatError
from resultgen.ingestion.interactive import (
    InputFn,
    prompt_dataset,
    prompt_optional,
    prompt_threads,
    prompt_yes_no,
)
from resultgen.pipeline import run_pipeline, score_dataset
from resultgen.report import format_summary, render_table
from resultgen.scoring.engine import ComputationError


# =============================================================================
# ARGUMENT TYPES
# =============================================================================

def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid value for threads: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Invalid value for threads: {value}")
    return number


def pass_mark(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid pass mark: {value}")
    if not MIN_MARK <= number <= MAX_MARK:
        raise argparse.ArgumentTypeError(
            f"Invalid pass mark: {value} (must be {MIN_MARK}-{MAX_MARK})"
        )
    return number


# =============================================================================
# OUTPUT
# =============================================================================

def print_results(result: dict) -> None:
    """Print run settings, the results table and the summary."""
    print(f"Using threads: {result['workers']}")
    print(f"Pass mark per subject: {result['pass_threshold']}")
    print()
    print(render_table(result['ranked'], result['subjects']))
    print()
    print(format_summary(result['summary']))


def write_outputs(result: dict, output: Optional[str], json_path: Optional[str], excel_path: Optional[str]) -> None:
    """Write the requested files. Raises OSError on write failure."""
    ranked = result['ranked']
    subjects = result['subjects']

    if output:
        path = write_results_csv(ranked, subjects, Path(output))
        print(f"\nResults written to: {path}")
    if json_path:
        path = save_json(ranked, subjects, Path(json_path))
        print(f"JSON saved to: {path}")
    if excel_path:
        excel = Path(excel_path)
        path = save_excel(ranked, subjects, file_name=excel.name, folder=excel.parent)
        print(f"Excel saved to: {path}")


# =============================================================================
# MODES
# =============================================================================

def run_interactive(pass_threshold: int = PASS_MARK, input_fn: InputFn = input) -> int:
    """Collect a roster from prompts, show results and optionally write CSV."""
    print("Interactive mode: Enter student and subject details.")
    print()

    threads = prompt_threads(input_fn=input_fn)
    dataset = prompt_dataset(input_fn=input_fn)

    try:
        result = score_dataset(dataset, pass_threshold, threads)
    except (ComputationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print()
    print_results(result)

    if prompt_yes_no("Write results to CSV? [Y/n]: ", True, input_fn=input_fn):
        output = prompt_optional(f"Output path [{DEFAULT_OUTPUT_CSV}]: ", DEFAULT_OUTPUT_CSV, input_fn=input_fn)
        try:
            write_outputs(result, output, None, None)
        except OSError as e:
            print(f"Failed to write CSV: {e}", file=sys.stderr)
    return 0


def run_file(args: argparse.Namespace) -> int:
    """Process an input CSV file and write the requested outputs."""
    input_path = Path(args.input)

    try:
        text = input_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: could not read {input_path}: {e}", file=sys.stderr)
        return 1

    print(f"Loaded input from: {input_path.resolve()}")

    try:
        result = run_pipeline(text, args.pass_mark, args.threads)
    except (FormatError, ComputationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_results(result)

    try:
        write_outputs(result, args.output, args.json, args.excel)
    except OSError as e:
        print(f"Failed to write results: {e}", file=sys.stderr)
        return 1

    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="resultgen",
        description="Multi-threaded Student Result Generator",
        epilog="CSV format (header required): ID,Name,<Subject1>,<Subject2>,...",
    )
    parser.add_argument(
        "-i", "--input",
        help="Input CSV file path (with header)",
    )
    parser.add_argument(
        "-o", "--output",
        default=DEFAULT_OUTPUT_CSV,
        help=f"Output CSV file path (default: {DEFAULT_OUTPUT_CSV})",
    )
    parser.add_argument(
        "-t", "--threads",
        type=positive_int,
        default=None,
        help="Number of worker threads (default: CPU cores, at least 2)",
    )
    parser.add_argument(
        "-p", "--pass-mark",
        type=pass_mark,
        default=PASS_MARK,
        help=f"Pass mark per subject (default: {PASS_MARK})",
    )
    parser.add_argument(
        "--json",
        metavar="PATH",
        help="Also save results as a JSON document",
    )
    parser.add_argument(
        "--excel",
        metavar="PATH",
        help="Also save results as an Excel workbook",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.input is None:
        print("No input provided. Switching to interactive mode.\n")
        return run_interactive(args.pass_mark)

    if not Path(args.input).exists():
        print(f"Input file not found: {Path(args.input).resolve()}")
        print("Falling back to interactive mode.\n")
        return run_interactive(args.pass_mark)

    return run_file(args)


if __name__ == "__main__":
    sys.exit(main())
