#!/usr/bin/env python3
"""
Type histogram script for realtype.

Loads values from a JSON array file or a JSON Lines file, classifies each one
and reports how many values fall under every label.
"""

import argparse
import json
import logging
import os
import sys

from tqdm import tqdm

from realtype.aggregate import all_same_type, all_unique_type, count_by_type
from realtype.config import OUTPUT_FORMATS, configure_logging, get_config
from realtype.data import load_values

RESULTS_FILE_NAME = "type_counts.json"


def summarize(values, progress: bool = False):
    """Histogram plus the same/unique verdicts for a list of values."""
    items = tqdm(values, desc="Classifying", disable=not progress)
    histogram = count_by_type(items)
    return {
        'total_values': len(values),
        'type_counts': [[label, count] for label, count in histogram],
        'all_same_type': all_same_type(values),
        'all_unique_type': all_unique_type(values),
    }


def format_text(results) -> str:
    lines = [f"Values: {results['total_values']}"]
    width = max((len(label) for label, _ in results['type_counts']), default=0)
    for label, count in results['type_counts']:
        lines.append(f"  {label.ljust(width)}  {count}")
    lines.append(f"All same type: {results['all_same_type']}")
    lines.append(f"All unique type: {results['all_unique_type']}")
    return "\n".join(lines)


def main(args) -> int:
    """
    Load, classify and report. Returns the exit status.
    """
    logging.info(f"Loading values from: {args.values_file}")
    try:
        values = load_values(args.values_file)
    except (OSError, ValueError) as e:
        logging.error(f"Failed to load values: {e}")
        return 1

    results = summarize(values, progress=args.progress)
    results['values_file'] = str(args.values_file)

    if args.format == "json":
        print(json.dumps(results, indent=4))
    else:
        print(format_text(results))

    if args.save:
        os.makedirs(args.output_dir, exist_ok=True)
        output_file = os.path.join(args.output_dir, RESULTS_FILE_NAME)
        logging.info(f"Saving type counts to: {output_file}")
        try:
            with open(output_file, "w", encoding='utf-8') as writer:
                json.dump(results, writer, indent=4)
        except OSError as e:
            logging.error(f"Failed to save results to {output_file}: {e}")
            return 1

    return 0


def cli(argv=None) -> int:
    config = get_config()
    configure_logging(config)

    parser = argparse.ArgumentParser(
        description="Count the real types of the values stored in a JSON or JSON Lines file.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--values_file",
        type=str,
        required=True,
        help="Path to a JSON array file, or a .jsonl/.ndjson file with one value per line."
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=OUTPUT_FORMATS,
        default=config.output_format,
        help="How to print the results."
    )
    parser.add_argument(
        "--output_dir",
        type=str,
        default=config.output_dir,
        help="Directory to save results."
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help=f"Write {RESULTS_FILE_NAME} to the output directory."
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while classifying."
    )

    args = parser.parse_args(argv)
    return main(args)


if __name__ == "__main__":
    sys.exit(cli())
