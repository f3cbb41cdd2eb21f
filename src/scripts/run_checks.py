#!/usr/bin/env python3
"""
Check script for realtype.

Runs the built-in suite of checks against the classifier and the array-level
queries, prints a summary and optionally saves the results as JSON.
"""

import argparse
import json
import logging
import math
import os
import sys
import time
from collections import UserString

from realtype.aggregate import (
    all_same_type,
    all_unique_type,
    basic_kinds,
    classify_items,
    count_by_type,
)
from realtype.cache import get_cache
from realtype.config import configure_logging, get_config, print_config_summary
from realtype.data import known_values
from realtype.harness import CheckSuite, are_equal
from realtype.kinds import UNDEFINED, basic_kind

RESULTS_FILE_NAME = "check_results.json"


def build_suite() -> CheckSuite:
    """Run every check and return the populated suite."""
    suite = CheckSuite("realtype")

    suite.block("are_equal")
    suite.check("Equal", are_equal(123, 123), True)
    suite.check("Number and string", are_equal(321, "321"), False)
    suite.check("Equal arrays", are_equal([1, 2], [1, 2]), True)
    suite.check("Not equal arrays", are_equal([1, 2], [1, 3]), False)
    suite.check("Different types", are_equal(["array"], True), False)

    suite.block("basic_kind")
    suite.check("Boolean", basic_kind(True), "boolean")
    suite.check("Number", basic_kind(123), "number")
    suite.check("String", basic_kind("whoo"), "string")
    suite.check("Array", basic_kind([]), "object")
    suite.check("Object", basic_kind({}), "object")
    suite.check("Function", basic_kind(lambda: None), "function")
    suite.check("Undefined", basic_kind(UNDEFINED), "undefined")
    suite.check("Null", basic_kind(None), "object")

    suite.block("all_same_type")
    suite.check("All values are numbers", all_same_type([11, 12, 13]), True)
    suite.check("All values are strings", all_same_type(["11", "12", "13"]), True)
    suite.check("All values are strings but wait", all_same_type(["11", UserString("12"), "13"]), False)
    suite.check(
        "Values like a number",
        all_same_type([123, float("nan"), math.inf], classify=basic_kind),
        True,
    )
    suite.check("Values like a number are not all numbers", all_same_type([123, float("nan"), math.inf]), False)
    suite.check("Values like an object", all_same_type([{}]), True)
    suite.check("Empty array", all_same_type([]), True)

    table = known_values()
    values = [value for value, _, _ in table]

    suite.block("basic_kinds VS classify_items")
    suite.check("Check basic types", basic_kinds(values), [kind for _, kind, _ in table])
    suite.check("Check real types", classify_items(values), [label for _, _, label in table])
    suite.check("Empty array", classify_items([]), [])

    suite.block("all_unique_type")
    suite.check("All value types in the array are unique", all_unique_type([True, 123, "123"]), True)
    suite.check("Two values have the same type", all_unique_type([True, 123, "123" == 123]), False)
    suite.check("There are no repeated types in known values", all_unique_type(values), True)
    suite.check("Empty array", all_unique_type([]), True)

    suite.block("count_by_type")
    suite.check(
        "Count unique types of array items",
        count_by_type([True, None, not None, not not None, {}]),
        [("boolean", 3), ("null", 1), ("object", 1)],
    )
    suite.check(
        "Counted unique types are sorted",
        count_by_type([{}, None, True, not None, not not None]),
        [("boolean", 3), ("null", 1), ("object", 1)],
    )
    suite.check("Empty array", count_by_type([]), [])

    return suite


def main(args) -> int:
    """
    Run the suite, print the summary and save results. Returns the exit status.
    """
    logging.info("Starting check run...")
    start_time = time.time()
    suite = build_suite()
    duration = time.time() - start_time

    results = suite.summary()
    results['duration_seconds'] = duration
    results['cache_stats'] = get_cache().get_stats()

    print(f"\n--- {suite.name} check results ---")
    print("=" * 50)
    print(f"  Total checks: {results['total']}")
    print(f"  Passed: {results['passed']}")
    print(f"  Failed: {results['failed']}")
    print(f"  Duration: {duration:.4f}s")
    for failure in results['failures']:
        print(f"  [FAIL] {failure['block']}: {failure['description']}")
        print(f"    expected {failure['expected']}")
        print(f"    actual   {failure['actual']}")

    if args.save:
        os.makedirs(args.output_dir, exist_ok=True)
        output_file = os.path.join(args.output_dir, RESULTS_FILE_NAME)
        logging.info(f"Saving check results to: {output_file}")
        try:
            with open(output_file, "w", encoding='utf-8') as writer:
                json.dump(results, writer, indent=4)
        except OSError as e:
            logging.error(f"Failed to save results to {output_file}: {e}")
            return 1

    if not suite.ok:
        logging.error(f"{suite.failed} of {results['total']} checks failed.")
        return 1

    logging.info("All checks passed.")
    return 0


def cli(argv=None) -> int:
    config = get_config()
    configure_logging(config)

    parser = argparse.ArgumentParser(
        description="Run the built-in realtype checks.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--output_dir",
        type=str,
        default=config.output_dir,
        help="Directory to save check results."
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help=f"Write {RESULTS_FILE_NAME} to the output directory."
    )
    parser.add_argument(
        "--show_config",
        action="store_true",
        help="Print the configuration in effect and exit; non-zero status if it is unusable."
    )

    args = parser.parse_args(argv)
    if args.show_config:
        return 0 if print_config_summary() else 1
    return main(args)


if __name__ == "__main__":
    sys.exit(cli())
