import json

from typer.testing import CliRunner

from mrzkit.cli import EXIT_CONTRACT, EXIT_INVALID, app

LINE1 = "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<"
LINE2 = "L898902C36UTO7408122F1204159ZE184226B<<<<<10"

runner = CliRunner()


def test_parse_valid_lines():
    result = runner.invoke(app, ["parse", LINE1, LINE2])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["valid"] is True
    assert payload["fields"]["first_name"] == "ANNA MARIA"
    assert payload["correction_metrics"] is None


def test_parse_rejects_short_line_in_strict_mode():
    result = runner.invoke(app, ["parse", LINE1[:30], LINE2])
    assert result.exit_code == EXIT_CONTRACT


def test_parse_with_correction():
    result = runner.invoke(app, ["parse", LINE1[:30], LINE2, "--correct"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["corrected"] is True
    assert payload["correction_metrics"]["attempt_number"] == 1


def test_parse_invalid_checksum_exit_code():
    broken = LINE2[:9] + "7" + LINE2[10:]
    result = runner.invoke(app, ["parse", LINE1, broken])
    assert result.exit_code == EXIT_INVALID
    assert json.loads(result.stdout)["valid"] is False


def test_create_prints_two_lines():
    result = runner.invoke(
        app,
        [
            "create",
            "--issuing-state", "UTO",
            "--last-name", "Eriksson",
            "--first-name", "Anna Maria",
            "--document-number", "L898902C3",
            "--nationality", "UTO",
            "--birth-date", "1974-08-12",
            "--sex", "female",
            "--expiration-date", "2012-04-15",
            "--personal-number", "ZE184226B",
        ],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [LINE1, LINE2]


def test_create_rejects_bad_date():
    result = runner.invoke(
        app,
        [
            "create",
            "--issuing-state", "UTO",
            "--last-name", "X",
            "--first-name", "Y",
            "--document-number", "1",
            "--nationality", "UTO",
            "--birth-date", "12/08/1974",
            "--expiration-date", "2012-04-15",
        ],
    )
    assert result.exit_code == EXIT_CONTRACT


def test_scan_text_file(tmp_path):
    path = tmp_path / "ocr.txt"
    path.write_text(f"some header\n{LINE1}\n{LINE2.replace('0', 'O', 1)}\n", encoding="utf-8")
    result = runner.invoke(app, ["scan", str(path)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["lines"]["line2"] == LINE2


def test_scan_text_file_without_mrz(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("no machine readable zone here\n", encoding="utf-8")
    result = runner.invoke(app, ["scan", str(path)])
    assert result.exit_code == EXIT_INVALID
