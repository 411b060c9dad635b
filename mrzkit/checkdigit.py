"""ICAO 9303 check digits.

Character values: ``<`` is 0, ``0``-``9`` are 0-9, ``A``-``Z`` are 10-35.
Anything else is not legal in an MRZ but still maps to 0; charset validation
is the job of the field parsers.
"""
from __future__ import annotations

from typing import Sequence, Tuple

FILLER = "<"
WEIGHTS: Tuple[int, int, int] = (7, 3, 1)


def _build_char_values() -> bytes:
    table = bytearray(256)
    for code in range(ord("0"), ord("9") + 1):
        table[code] = code - ord("0")
    for code in range(ord("A"), ord("Z") + 1):
        table[code] = code - ord("A") + 10
    return bytes(table)


CHAR_VALUES = _build_char_values()

# TD3 line 2 windows: (start, end) of the protected data and the check position.
DOCUMENT_NUMBER_WINDOW = (0, 9)
DOCUMENT_NUMBER_CHECK = 9
BIRTH_DATE_WINDOW = (13, 19)
BIRTH_DATE_CHECK = 19
EXPIRATION_DATE_WINDOW = (21, 27)
EXPIRATION_DATE_CHECK = 27
PERSONAL_NUMBER_WINDOW = (28, 42)
PERSONAL_NUMBER_CHECK = 42
COMPOSITE_WINDOWS: Tuple[Tuple[int, int], ...] = ((0, 10), (13, 20), (21, 43))
COMPOSITE_CHECK = 43

TD3_LINE_LENGTH = 44

_SIMPLE_CHECKS: Tuple[Tuple[Tuple[int, int], int], ...] = (
    (DOCUMENT_NUMBER_WINDOW, DOCUMENT_NUMBER_CHECK),
    (BIRTH_DATE_WINDOW, BIRTH_DATE_CHECK),
    (EXPIRATION_DATE_WINDOW, EXPIRATION_DATE_CHECK),
    (PERSONAL_NUMBER_WINDOW, PERSONAL_NUMBER_CHECK),
)


def char_value(ch: str) -> int:
    code = ord(ch)
    return CHAR_VALUES[code] if code < 256 else 0


def calculate_check_digit(text: str) -> int:
    total = 0
    for idx, ch in enumerate(text):
        total += char_value(ch) * WEIGHTS[idx % 3]
    return total % 10


def _provided_digit(ch: str) -> int:
    if ch == FILLER:
        return 0
    if len(ch) == 1 and "0" <= ch <= "9":
        return ord(ch) - ord("0")
    return -1


def validate_check_digit(text: str, check_digit: str) -> bool:
    provided = _provided_digit(check_digit)
    if provided < 0:
        return False
    return calculate_check_digit(text) == provided


def composite_input(line2: str) -> str:
    """Logical concatenation of the line 2 ranges covered by the composite digit."""
    return "".join(line2[start:end] for start, end in COMPOSITE_WINDOWS)


def _windowed_sum(line2: str, windows: Sequence[Tuple[int, int]]) -> int:
    total = 0
    weight_idx = 0
    for start, end in windows:
        for pos in range(start, end):
            code = ord(line2[pos])
            value = CHAR_VALUES[code] if code < 256 else 0
            total += value * WEIGHTS[weight_idx % 3]
            weight_idx += 1
    return total


def fast_validate_td3_check_digits(line2: str) -> bool:
    """Check all five TD3 line 2 check digits without parsing any field.

    Used as a cheap filter by the correction search. It works straight off the
    fixed offsets above and must give the same answer as
    ``validate_check_digit`` on the corresponding slices.
    """
    if len(line2) != TD3_LINE_LENGTH:
        return False
    for _, check_pos in _SIMPLE_CHECKS:
        if _provided_digit(line2[check_pos]) < 0:
            return False
    if _provided_digit(line2[COMPOSITE_CHECK]) < 0:
        return False

    for window, check_pos in _SIMPLE_CHECKS:
        if _windowed_sum(line2, (window,)) % 10 != _provided_digit(line2[check_pos]):
            return False
    return _windowed_sum(line2, COMPOSITE_WINDOWS) % 10 == _provided_digit(line2[COMPOSITE_CHECK])


__all__ = [
    "CHAR_VALUES",
    "FILLER",
    "TD3_LINE_LENGTH",
    "WEIGHTS",
    "calculate_check_digit",
    "char_value",
    "composite_input",
    "fast_validate_td3_check_digits",
    "validate_check_digit",
]
