#!/usr/bin/env python3
"""
Data handling module for realtype.

Provides the table of known values used by the check suite and loads
values to classify from JSON or JSON Lines files.
"""

import datetime
import json
import logging
import math
import re
import threading
from pathlib import Path
from typing import Any, List, Tuple, Union

from .kinds import UNDEFINED, Symbol

JSON_LINES_SUFFIXES = ('.jsonl', '.ndjson')


def known_values() -> List[Tuple[Any, str, str]]:
    """Return (value, basic kind, real type) for one value of every label.

    A fresh list is built on each call since some of the values are mutable.
    """
    return [
        (True, 'boolean', 'boolean'),
        (420, 'number', 'number'),
        ('You found an Easter egg! 🥚️', 'string', 'string'),
        ([1, 2, 3], 'object', 'array'),
        ({'hello': 'world'}, 'object', 'object'),
        (lambda: ';)', 'function', 'function'),
        (UNDEFINED, 'undefined', 'undefined'),
        (None, 'object', 'null'),
        (float('nan'), 'number', 'NaN'),
        (math.inf, 'number', 'Infinity'),
        (datetime.datetime(1961, 4, 12, 9, 7), 'object', 'date'),
        (re.compile('Gagarin', re.IGNORECASE), 'object', 'regexp'),
        (set(), 'object', 'set'),
        (Symbol('~_~'), 'symbol', 'symbol'),
        (999999999999999969, 'bigint', 'bigint'),
        (threading.Event(), 'object', 'event'),
    ]


def _load_json_lines(file_path: Path) -> List[Any]:
    """Load one JSON value per line, skipping blank and malformed lines."""
    values: List[Any] = []
    with open(file_path, mode='r', encoding='utf-8') as file:
        for i, line in enumerate(file, start=1):  # 1-indexed for user-friendly line numbers
            line = line.strip()
            if not line:
                continue
            try:
                values.append(json.loads(line))
            except json.JSONDecodeError as e:
                logging.warning(f"Skipping malformed JSON in {file_path} at line {i}: {e.msg}")
    return values


def _load_json_array(file_path: Path) -> List[Any]:
    """Load a file holding a single JSON array."""
    text = file_path.read_text(encoding='utf-8')
    if not text.strip():
        logging.warning(f"Values file {file_path} is empty")
        return []

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path} at line {e.lineno}: {e.msg}") from e

    if not isinstance(document, list):
        raise ValueError(
            f"Expected a JSON array in {file_path}, got {type(document).__name__}"
        )
    return document


def load_values(file_path: Union[str, Path]) -> List[Any]:
    """
    Loads the values stored in a JSON or JSON Lines file.

    Args:
        file_path: Path to the file. Files ending in .jsonl or .ndjson hold one
                   value per line; any other file holds a single JSON array.

    Returns:
        The decoded values, in file order. NaN and Infinity literals decode to floats.

    Raises:
        FileNotFoundError: When the file path does not exist
        ValueError: When a JSON array file is malformed or holds something else
    """
    file_path = Path(file_path)

    try:
        if file_path.suffix.lower() in JSON_LINES_SUFFIXES:
            values = _load_json_lines(file_path)
        else:
            values = _load_json_array(file_path)
    except (IOError, OSError) as e:
        logging.error(f"Error reading file {file_path}: {e}")
        raise

    logging.info(f"Successfully loaded {len(values)} values from {file_path}")
    return values
