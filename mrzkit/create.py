"""Build checksummed TD3 lines from structured passport data."""
from __future__ import annotations

from typing import Tuple

from mrzkit.checkdigit import FILLER, calculate_check_digit
from mrzkit.models import MRZDate, MRZInput

NAMES_LENGTH = 39

_SEX_CODES = {"male": "M", "female": "F", "unspecified": FILLER}


def pad_field(value: str, length: int) -> str:
    # Over-long input is truncated without complaint.
    cleaned = value.upper().replace(" ", FILLER)
    return cleaned[:length].ljust(length, FILLER)


def format_date(value: MRZDate) -> str:
    """YYMMDD. The century is dropped, so 1974 and 2074 encode the same."""
    return f"{value.year % 100:02d}{value.month:02d}{value.day:02d}"


def format_sex(sex: str) -> str:
    try:
        return _SEX_CODES[sex]
    except KeyError as exc:
        raise ValueError(f"Unknown sex value: {sex!r}, expected one of {sorted(_SEX_CODES)}") from exc


def format_names(last_name: str, first_name: str, length: int = NAMES_LENGTH) -> str:
    last = last_name.upper().replace(" ", FILLER)
    first = first_name.upper().replace(" ", FILLER)
    return pad_field(f"{last}{FILLER * 2}{first}", length)


def create_mrz(data: MRZInput) -> Tuple[str, str]:
    line1 = pad_field(data.document_code, 2) + pad_field(data.issuing_state, 3)
    line1 += format_names(data.last_name, data.first_name)

    document_number = pad_field(data.document_number, 9)
    document_number_check = str(calculate_check_digit(document_number))
    nationality = pad_field(data.nationality, 3)
    birth_date = format_date(data.birth_date)
    birth_date_check = str(calculate_check_digit(birth_date))
    sex = format_sex(data.sex)
    expiration_date = format_date(data.expiration_date)
    expiration_date_check = str(calculate_check_digit(expiration_date))
    personal_number = pad_field(data.personal_number or "", 14)
    personal_number_check = str(calculate_check_digit(personal_number))

    composite = (
        document_number
        + document_number_check
        + birth_date
        + birth_date_check
        + expiration_date
        + expiration_date_check
        + personal_number
        + personal_number_check
    )
    composite_check = str(calculate_check_digit(composite))

    line2 = (
        document_number
        + document_number_check
        + nationality
        + birth_date
        + birth_date_check
        + sex
        + expiration_date
        + expiration_date_check
        + personal_number
        + personal_number_check
        + composite_check
    )
    return line1, line2


__all__ = ["create_mrz", "format_date", "format_names", "format_sex", "pad_field"]
