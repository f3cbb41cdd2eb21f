#!/usr/bin/env python3
"""
Minimal assertion harness.

Checks are grouped into named blocks and reported through logging as
`[OK] description` or `[FAIL] description`; failures are followed by the
expected and actual values at DEBUG level.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def are_equal(a: Any, b: Any) -> bool:
    """
    Compare two values, descending into lists and tuples.

    Sequences are equal when they have the same length and equal items; a
    sequence never equals a non-sequence. Booleans only equal booleans, so
    True and 1 differ.
    """
    if _is_sequence(a) and _is_sequence(b):
        return len(a) == len(b) and all(are_equal(x, y) for x, y in zip(a, b))
    if _is_sequence(a) or _is_sequence(b):
        return False
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return bool(a == b)


@dataclass
class CheckResult:
    """Outcome of a single check."""
    block: Optional[str]
    description: str
    passed: bool
    expected: Any = None
    actual: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; values are stored by repr."""
        return {
            'block': self.block,
            'description': self.description,
            'passed': self.passed,
            'expected': repr(self.expected),
            'actual': repr(self.actual),
        }


class CheckSuite:
    """Collects check results, block by block."""

    def __init__(self, name: str = 'checks'):
        self.name = name
        self.current_block: Optional[str] = None
        self.results: List[CheckResult] = []

    def block(self, name: str) -> None:
        """Start a new labelled block of checks."""
        self.current_block = name
        logging.info(f"# {name}")

    def check(self, description: str, actual: Any, expected: Any) -> bool:
        """Record whether `actual` equals `expected` and log the verdict."""
        passed = are_equal(actual, expected)
        self.results.append(CheckResult(
            block=self.current_block,
            description=description,
            passed=passed,
            expected=expected,
            actual=actual,
        ))

        if passed:
            logging.info(f"[OK] {description}")
        else:
            logging.error(f"[FAIL] {description}")
            logging.debug(f"Expected: {expected!r}")
            logging.debug(f"Actual: {actual!r}")
        return passed

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def summary(self) -> Dict[str, Any]:
        """Totals plus the list of failed checks."""
        return {
            'suite': self.name,
            'total': len(self.results),
            'passed': self.passed,
            'failed': self.failed,
            'failures': [r.to_dict() for r in self.results if not r.passed],
        }
