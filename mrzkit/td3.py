"""TD3 (two-line passport) decoder.

Line 1: document code (0-2), issuing state (2-5), names (5-44).
Line 2: document number (0-9) + check (9), nationality (10-13),
birth date (13-19) + check (19), sex (20), expiration date (21-27) + check (27),
personal number (28-42) + check (42), composite check (43).
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from mrzkit.checkdigit import (
    COMPOSITE_CHECK,
    COMPOSITE_WINDOWS,
    TD3_LINE_LENGTH,
    calculate_check_digit,
    composite_input,
    validate_check_digit,
)
from mrzkit.fields import (
    FIELD_SPECS,
    FieldParse,
    FieldSpec,
    parse_date,
    parse_document_code,
    parse_document_number,
    parse_names,
    parse_personal_number,
    parse_sex,
    parse_state,
)
from mrzkit.models import FieldDetail, ParseResult, Range


class MRZFormatError(ValueError):
    """Raised when the input breaks the TD3 shape contract (line count or length)."""


def check_td3_shape(lines: Sequence[str]) -> None:
    if len(lines) != 2:
        raise MRZFormatError(f"TD3 format requires exactly 2 lines, got {len(lines)}")
    for idx, line in enumerate(lines, start=1):
        if len(line) != TD3_LINE_LENGTH:
            raise MRZFormatError(f"TD3 line {idx} must be {TD3_LINE_LENGTH} characters, got {len(line)}")


class _Collector:
    def __init__(self) -> None:
        self.details: List[FieldDetail] = []
        self.fields: Dict[str, Optional[str]] = {}

    @property
    def valid(self) -> bool:
        return all(detail.valid for detail in self.details)

    def add(
        self,
        name: str,
        label: str,
        parsed: FieldParse,
        line: int,
        start: int,
        end: int,
        ranges: Optional[List[Range]] = None,
    ) -> None:
        self.details.append(
            FieldDetail(
                label=label,
                field=name,
                value=parsed.value,
                valid=parsed.valid,
                ranges=ranges or [Range(line, start, end)],
                line=line,
                start=start,
                end=end,
                error=parsed.error,
                error_kind=parsed.error_kind,
            )
        )
        self.fields[name] = parsed.value if parsed.valid else None

    def add_spec(self, spec: FieldSpec, parsed: FieldParse) -> None:
        self.add(spec.name, spec.label, parsed, spec.line, spec.start, spec.end)

    def add_check(self, name: str, label: str, line2: str, data: str, position: int, ranges=None) -> None:
        provided = line2[position]
        if validate_check_digit(data, provided):
            parsed = FieldParse(value=provided)
        else:
            expected = calculate_check_digit(data)
            parsed = FieldParse(
                value=provided,
                error=f"invalid check digit: {provided}. Must be {expected}",
                error_kind="checksum",
            )
        self.add(name, label, parsed, 1, position, position + 1, ranges)


def parse_td3(lines: Sequence[str], corrected: bool = False) -> ParseResult:
    check_td3_shape(lines)
    line1, line2 = lines[0], lines[1]
    out = _Collector()

    spec = FIELD_SPECS["document_code"]
    out.add_spec(spec, parse_document_code(spec.slice(line1)))
    spec = FIELD_SPECS["issuing_state"]
    out.add_spec(spec, parse_state(spec.slice(line1)))

    names = FIELD_SPECS["names"]
    last, first = parse_names(names.slice(line1))
    whole = [Range(0, names.start, names.end)]
    out.add("last_name", "Last name", FieldParse(last.value), 0, names.start + last.start, names.start + last.end, whole)
    out.add(
        "first_name", "First name", FieldParse(first.value), 0, names.start + first.start, names.start + first.end, whole
    )

    spec = FIELD_SPECS["document_number"]
    raw = spec.slice(line2)
    out.add_spec(spec, parse_document_number(raw))
    out.add_check("document_number_check_digit", "Document number check digit", line2, raw, spec.check_position)

    spec = FIELD_SPECS["nationality"]
    out.add_spec(spec, parse_state(spec.slice(line2)))

    spec = FIELD_SPECS["birth_date"]
    raw = spec.slice(line2)
    out.add_spec(spec, parse_date(raw))
    out.add_check("birth_date_check_digit", "Birth date check digit", line2, raw, spec.check_position)

    spec = FIELD_SPECS["sex"]
    out.add_spec(spec, parse_sex(spec.slice(line2)))

    spec = FIELD_SPECS["expiration_date"]
    raw = spec.slice(line2)
    out.add_spec(spec, parse_date(raw))
    out.add_check("expiration_date_check_digit", "Expiration date check digit", line2, raw, spec.check_position)

    spec = FIELD_SPECS["personal_number"]
    raw = spec.slice(line2)
    personal = parse_personal_number(raw)
    out.add(spec.name, spec.label, personal, 1, spec.start, spec.start + len(personal.value), [Range(1, spec.start, spec.end)])
    out.add_check("personal_number_check_digit", "Personal number check digit", line2, raw, spec.check_position)

    composite_ranges = [Range(1, start, end) for start, end in COMPOSITE_WINDOWS]
    composite_ranges.append(Range(1, COMPOSITE_CHECK, COMPOSITE_CHECK + 1))
    out.add_check(
        "composite_check_digit",
        "Composite check digit",
        line2,
        composite_input(line2),
        COMPOSITE_CHECK,
        composite_ranges,
    )

    return ParseResult(
        valid=out.valid,
        corrected=corrected,
        fields=out.fields,
        details=out.details,
        lines={"line1": line1, "line2": line2},
    )


__all__ = ["MRZFormatError", "check_td3_shape", "parse_td3"]
