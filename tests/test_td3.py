import pytest

from mrzkit.fields import (
    ERROR_INVALID,
    ERROR_UNKNOWN,
    TD3_FIELDS,
    parse_date,
    parse_document_code,
    parse_document_number,
    parse_names,
    parse_sex,
    parse_state,
)
from mrzkit.parse import parse_mrz
from mrzkit.td3 import MRZFormatError, parse_td3

UTOPIA = (
    "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<",
    "L898902C36UTO7408122F1204159ZE184226B<<<<<10",
)
GERMANY = (
    "P<D<<MUSTERMANN<<ERIKA<<<<<<<<<<<<<<<<<<<<<<",
    "C01X0006H1D<<6408125F1710319<<<<<<<<<<<<<<<0",
)


def test_parses_utopia_specimen():
    result = parse_mrz(UTOPIA)

    assert result.valid
    assert not result.corrected
    assert result.correction_metrics is None
    assert result.document_number == "L898902C3"
    assert result.line1 == UTOPIA[0]
    assert result.line2 == UTOPIA[1]
    assert result.fields == {
        "document_code": "P",
        "issuing_state": "UTO",
        "last_name": "ERIKSSON",
        "first_name": "ANNA MARIA",
        "document_number": "L898902C3",
        "document_number_check_digit": "6",
        "nationality": "UTO",
        "birth_date": "740812",
        "birth_date_check_digit": "2",
        "sex": "female",
        "expiration_date": "120415",
        "expiration_date_check_digit": "9",
        "personal_number": "ZE184226B",
        "personal_number_check_digit": "1",
        "composite_check_digit": "0",
    }


def test_parses_german_specimen_with_filler_padded_state():
    result = parse_mrz(GERMANY)

    assert result.valid
    assert result.fields["issuing_state"] == "D"
    assert result.fields["nationality"] == "D"
    assert result.fields["personal_number"] == ""
    assert result.fields["personal_number_check_digit"] == "<"


@pytest.mark.parametrize(
    "lines, code, sex",
    [
        (("POCHNABULIKEMU<<ABULA<<<<<<<<<<<<<<<<<<<<<<<", "E596593216CHN9701078M2510077LAKCLCLMMBKGG932"), "PO", "male"),
        (("PTCHNCESHI<<YANGBEN<<<<<<<<<<<<<<<<<<<<<<<<<", "G622925996CHN8310291F1904220LCOCMKNENBPJB984"), "PT", "female"),
    ],
)
def test_parses_chinese_passports(lines, code, sex):
    result = parse_mrz(lines)
    assert result.valid
    assert result.fields["document_code"] == code
    assert result.fields["sex"] == sex
    assert result.fields["issuing_state"] == "CHN"


def test_empty_last_name():
    result = parse_mrz(("P<IND<<FIRST<NAME<<<<<<<<<<<<<<<<<<<<<<<<<<<", GERMANY[1]))
    assert result.valid
    assert result.fields["last_name"] == ""
    assert result.fields["first_name"] == "FIRST NAME"


def test_unspecified_sex():
    line2 = GERMANY[1][:20] + "<" + GERMANY[1][21:]
    result = parse_mrz((GERMANY[0], line2))
    assert result.fields["sex"] == "unspecified"
    assert result.valid


def test_length_contract_violation_names_line():
    with pytest.raises(MRZFormatError, match=r"line 1 must be 44 characters, got 25"):
        parse_mrz(("P<D<<MUSTERMANN<<ERIKA<<<", GERMANY[1]))
    with pytest.raises(MRZFormatError, match=r"line 2 must be 44 characters, got 43"):
        parse_mrz((GERMANY[0], GERMANY[1][:-1]))


def test_line_count_contract_violation():
    with pytest.raises(MRZFormatError, match="exactly 2 lines"):
        parse_td3([GERMANY[0]])
    with pytest.raises(MRZFormatError, match="exactly 2 lines"):
        parse_mrz([GERMANY[0], GERMANY[1], GERMANY[1]])
    with pytest.raises(ValueError):
        parse_mrz(GERMANY[0], error_correction=True)


def test_details_cover_every_field():
    result = parse_mrz(GERMANY)
    assert len(result.details) == 15
    assert all(detail.valid for detail in result.details)
    assert [d.field for d in result.details][:4] == ["document_code", "issuing_state", "last_name", "first_name"]
    composite = result.detail("composite_check_digit")
    assert [(r.line, r.start, r.end) for r in composite.ranges] == [(1, 0, 10), (1, 13, 20), (1, 21, 43), (1, 43, 44)]


def test_name_provenance():
    result = parse_mrz(UTOPIA)
    last = result.detail("last_name")
    first = result.detail("first_name")
    assert (last.start, last.end) == (5, 13)
    assert (first.start, first.end) == (15, 25)
    assert UTOPIA[0][first.start : first.end] == "ANNA<MARIA"


def test_bad_check_digit_is_reported_not_raised():
    line2 = UTOPIA[1][:9] + "7" + UTOPIA[1][10:]
    result = parse_mrz((UTOPIA[0], line2))

    assert not result.valid
    detail = result.detail("document_number_check_digit")
    assert not detail.valid
    assert detail.error == "invalid check digit: 7. Must be 6"
    assert result.fields["document_number_check_digit"] is None
    assert result.fields["document_number"] == "L898902C3"
    assert not result.detail("composite_check_digit").valid
    assert "Document number check digit: invalid check digit: 7. Must be 6" in result.errors


def test_unknown_document_code_is_kept_apart_from_malformed():
    unknown = parse_mrz(("PX" + UTOPIA[0][2:], UTOPIA[1])).detail("document_code")
    assert not unknown.valid
    assert unknown.error_kind == ERROR_UNKNOWN
    assert unknown.value == "PX"

    malformed = parse_mrz(("1<" + UTOPIA[0][2:], UTOPIA[1])).detail("document_code")
    assert not malformed.valid
    assert malformed.error_kind == ERROR_INVALID


def test_field_table_covers_both_lines():
    for line in (0, 1):
        covered = []
        for spec in TD3_FIELDS:
            if spec.line != line:
                continue
            covered.extend(range(spec.start, spec.end))
            if spec.check_position is not None:
                covered.append(spec.check_position)
        assert sorted(covered) == list(range(44))


def test_document_code_parser():
    assert parse_document_code("P<").value == "P"
    assert parse_document_code("PA").valid
    assert parse_document_code("V<").error_kind == ERROR_UNKNOWN
    assert parse_document_code("<<").error_kind == ERROR_INVALID
    assert parse_document_code("P1").error_kind == ERROR_INVALID


def test_state_parser():
    assert parse_state("UTO").value == "UTO"
    assert parse_state("D<<").value == "D"
    assert parse_state("<<<").error == "state code is empty"
    assert parse_state("U1O").error == "invalid state code: U1O"


def test_names_parser_without_separator():
    field = "A" * 37 + "<B"
    last, first = parse_names(field)
    assert last.value == "A" * 37 + " B"
    assert (last.start, last.end) == (0, 39)
    assert (first.value, first.start, first.end) == ("", 39, 39)


def test_document_number_parser():
    assert parse_document_number("AB123456<").value == "AB123456"
    assert parse_document_number("<<<<<<<<<").error == "document number is empty"
    assert not parse_document_number("AB12-456<").valid


@pytest.mark.parametrize(
    "value, valid",
    [
        ("740812", True),
        ("74<<<<", True),
        ("7408<<", True),
        ("741301", False),
        ("740001", False),
        ("740832", False),
        ("74081<", False),
        ("7A0812", False),
    ],
)
def test_date_parser(value, valid):
    assert parse_date(value).valid is valid


def test_sex_parser():
    assert parse_sex("M").value == "male"
    assert parse_sex("F").value == "female"
    assert parse_sex("<").value == "unspecified"
    assert parse_sex("X").error == "invalid sex: X. Must be M, F, or <"
