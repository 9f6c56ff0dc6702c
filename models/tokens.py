"""Tokenizing helpers shared by the reference parser and the sensor evaluators."""

from __future__ import annotations

import math
import re
from typing import List, Optional

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n``, ``\\r`` and ``\\r\\n`` only.

    Other characters ``str.splitlines`` treats as breaks (form feed, ``\\x85``,
    ...) stay inside the line and count as whitespace when it is split into
    fields. A trailing line break does not produce an empty last line.
    """

    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def split_fields(line: str) -> List[str]:
    """Strip ``line`` and split it on runs of whitespace."""

    return line.split()


def _is_plain_number(token: str) -> bool:
    # float()/int() also accept digit grouping underscores and non-ASCII digits.
    return token.isascii() and "_" not in token


def parse_real(token: str) -> Optional[float]:
    """Parse a finite real number, returning ``None`` when the token is not one."""

    if not _is_plain_number(token):
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_integer(token: str) -> Optional[int]:
    if not _is_plain_number(token):
        return None
    try:
        return int(token)
    except ValueError:
        return None
