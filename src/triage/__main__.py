"""CLI entry point for the triage tool.

Run with:
    python -m triage --csv papers.csv
    python -m triage --data-dir public/data
"""

import argparse
from pathlib import Path

from triage.config import ReviewConfig
from triage.runner import run_review


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="triage", description="Review and rate a dataset of papers."
    )
    parser.add_argument("--csv", type=Path, help="CSV file to review")
    parser.add_argument("--data-dir", type=Path, help="Directory of a chunked dataset")
    parser.add_argument("--base-url", help="URL serving a chunked dataset")
    parser.add_argument("--output-dir", type=Path, help="Where exports are written")
    parser.add_argument("--chunk-size", type=int, help="Papers per chunk")
    parser.add_argument("--year", type=int, help="Fallback year for unparsable rows")
    return parser.parse_args(argv)


def build_config(args) -> ReviewConfig:
    overrides = {
        "data_dir": args.data_dir,
        "base_url": args.base_url,
        "output_dir": args.output_dir,
        "chunk_size": args.chunk_size,
        "nominal_year": args.year,
    }
    return ReviewConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=None) -> None:
    args = parse_args(argv)
    run_review(build_config(args), csv_path=args.csv)


if __name__ == "__main__":
    main()
