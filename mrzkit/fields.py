from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from mrzkit.checkdigit import FILLER

TRAILING_FILLER_RE = re.compile(r"<+$")
ALPHA_RE = re.compile(r"^[A-Z<]+$")
ALPHANUM_RE = re.compile(r"^[0-9A-Z<]+$")
STATE_CODE_RE = re.compile(r"^[A-Z<]{3}$")
DATE_RE = re.compile(r"^[0-9<]{6}$")

PASSPORT_CODES = frozenset({"P", "PA", "PO", "PT"})

ERROR_INVALID = "invalid"
ERROR_UNKNOWN = "unknown"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    line: int
    start: int
    end: int
    kind: str
    check_position: Optional[int] = None

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


# Disjoint, covering both 44-character lines.
TD3_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("document_code", "Document code", 0, 0, 2, "alpha"),
    FieldSpec("issuing_state", "Issuing state", 0, 2, 5, "alpha"),
    FieldSpec("names", "Names", 0, 5, 44, "alpha"),
    FieldSpec("document_number", "Document number", 1, 0, 9, "alphanumeric", check_position=9),
    FieldSpec("nationality", "Nationality", 1, 10, 13, "alpha"),
    FieldSpec("birth_date", "Birth date", 1, 13, 19, "date", check_position=19),
    FieldSpec("sex", "Sex", 1, 20, 21, "sex"),
    FieldSpec("expiration_date", "Expiration date", 1, 21, 27, "date", check_position=27),
    FieldSpec("personal_number", "Personal number", 1, 28, 42, "alphanumeric", check_position=42),
    FieldSpec("composite_check_digit", "Composite check digit", 1, 43, 44, "digit"),
)

FIELD_SPECS = {spec.name: spec for spec in TD3_FIELDS}


@dataclass(frozen=True)
class FieldParse:
    value: str
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NamePart:
    value: str
    start: int
    end: int


def _invalid(value: str, message: str) -> FieldParse:
    return FieldParse(value=value, error=message, error_kind=ERROR_INVALID)


def strip_trailing_filler(text: str) -> str:
    return TRAILING_FILLER_RE.sub("", text)


def clean_text(text: str) -> str:
    return strip_trailing_filler(text).replace(FILLER, " ")


def parse_document_code(code: str) -> FieldParse:
    """Malformed codes are ``invalid``; well-formed but unrecognised ones are ``unknown``."""
    cleaned = code.replace(FILLER, "")
    if not cleaned or len(cleaned) > 2 or not ALPHA_RE.match(cleaned):
        return _invalid(code, f"invalid document code: {code}")
    if cleaned not in PASSPORT_CODES:
        return FieldParse(value=cleaned, error=f"unknown document code: {cleaned}", error_kind=ERROR_UNKNOWN)
    return FieldParse(value=cleaned)


def parse_state(state: str) -> FieldParse:
    if not STATE_CODE_RE.match(state):
        return _invalid(state, f"invalid state code: {state}")
    cleaned = state.replace(FILLER, "")
    if not cleaned:
        return _invalid("", "state code is empty")
    return FieldParse(value=cleaned)


def parse_names(names_field: str) -> Tuple[NamePart, NamePart]:
    """Split ``LAST<<FIRST<MIDDLE`` into (last, first) with offsets inside the field."""
    separator = names_field.find(FILLER * 2)
    if separator == -1:
        last_raw = strip_trailing_filler(names_field)
        size = len(names_field)
        return NamePart(clean_text(last_raw), 0, len(last_raw)), NamePart("", size, size)

    last_raw = names_field[:separator]
    first_start = separator + 2
    first_raw = strip_trailing_filler(names_field[first_start:])
    return (
        NamePart(clean_text(last_raw), 0, separator),
        NamePart(clean_text(first_raw), first_start, first_start + len(first_raw)),
    )


def parse_document_number(number: str) -> FieldParse:
    if not ALPHANUM_RE.match(number):
        return _invalid(number, f"invalid document number: {number}")
    cleaned = strip_trailing_filler(number)
    if not cleaned:
        return _invalid("", "document number is empty")
    return FieldParse(value=cleaned)


def parse_date(value: str) -> FieldParse:
    """YYMMDD; month and day may each be ``<<`` when unknown."""
    if not DATE_RE.match(value):
        return _invalid(value, f"invalid date format: {value}")
    month = value[2:4]
    if month != "<<" and not (month.isdigit() and 1 <= int(month) <= 12):
        return _invalid(value, f"invalid date month: {month}")
    day = value[4:6]
    if day != "<<" and not (day.isdigit() and 1 <= int(day) <= 31):
        return _invalid(value, f"invalid date day: {day}")
    return FieldParse(value=value)


def parse_sex(value: str) -> FieldParse:
    if value == "M":
        return FieldParse(value="male")
    if value == "F":
        return FieldParse(value="female")
    if value == FILLER:
        return FieldParse(value="unspecified")
    return _invalid(value, f"invalid sex: {value}. Must be M, F, or <")


def parse_personal_number(value: str) -> FieldParse:
    return FieldParse(value=strip_trailing_filler(value))


__all__ = [
    "ERROR_INVALID",
    "ERROR_UNKNOWN",
    "FIELD_SPECS",
    "FieldParse",
    "FieldSpec",
    "NamePart",
    "PASSPORT_CODES",
    "TD3_FIELDS",
    "clean_text",
    "parse_date",
    "parse_document_code",
    "parse_document_number",
    "parse_names",
    "parse_personal_number",
    "parse_sex",
    "parse_state",
    "strip_trailing_filler",
]
