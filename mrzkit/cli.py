from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from mrzkit import ENGINE_VERSION
from mrzkit.correction import CorrectionConfig, resolve_max_combinations
from mrzkit.create import create_mrz
from mrzkit.models import MRZInput
from mrzkit.ocr import BackendUnavailable, OCRConfig
from mrzkit.parse import parse_mrz
from mrzkit.scan import scan_image, scan_text
from mrzkit.td3 import MRZFormatError

app = typer.Typer(help=f"mrzkit v{ENGINE_VERSION} – TD3 passport MRZ decode, encode and repair")

EXIT_INVALID = 1
EXIT_CONTRACT = 2

TEXT_SUFFIXES = {".txt", ".mrz", ""}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _correction_config(max_combinations: int | None) -> CorrectionConfig:
    return CorrectionConfig(max_combinations=resolve_max_combinations(max_combinations))


@app.command()
def parse(
    line1: str = typer.Argument(..., help="First MRZ line"),
    line2: str = typer.Argument(..., help="Second MRZ line"),
    correct: bool = typer.Option(False, "--correct", help="Pad/truncate and repair OCR confusions."),
    max_combinations: int | None = typer.Option(
        None, "--max-combinations", help="Cap on candidates tried in correction mode."
    ),
):
    try:
        result = parse_mrz((line1, line2), error_correction=correct, config=_correction_config(max_combinations))
    except MRZFormatError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONTRACT) from exc
    typer.echo(json.dumps(result.to_dict(), indent=2))
    if not result.valid:
        raise typer.Exit(code=EXIT_INVALID)


@app.command()
def create(
    document_code: str = typer.Option("P", "--document-code"),
    issuing_state: str = typer.Option(..., "--issuing-state"),
    last_name: str = typer.Option(..., "--last-name"),
    first_name: str = typer.Option(..., "--first-name"),
    document_number: str = typer.Option(..., "--document-number"),
    nationality: str = typer.Option(..., "--nationality"),
    birth_date: str = typer.Option(..., "--birth-date", help="YYYY-MM-DD"),
    sex: str = typer.Option("unspecified", "--sex", help="male, female or unspecified"),
    expiration_date: str = typer.Option(..., "--expiration-date", help="YYYY-MM-DD"),
    personal_number: str | None = typer.Option(None, "--personal-number"),
):
    try:
        data = MRZInput.from_dict(
            {
                "document_code": document_code,
                "issuing_state": issuing_state,
                "last_name": last_name,
                "first_name": first_name,
                "document_number": document_number,
                "nationality": nationality,
                "birth_date": birth_date,
                "sex": sex,
                "expiration_date": expiration_date,
                "personal_number": personal_number,
            }
        )
        line1, line2 = create_mrz(data)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONTRACT) from exc
    typer.echo(line1)
    typer.echo(line2)


@app.command()
def scan(
    file: Path = typer.Argument(..., exists=True, readable=True, help="Text file or image containing an MRZ"),
    correct: bool = typer.Option(True, "--correct/--no-correct", help="Repair OCR confusions."),
    ocr_backend: str | None = typer.Option(None, "--ocr-backend", help="OCR backend mode: auto, tesseract."),
    bottom_fraction: float = typer.Option(
        1.0, "--bottom-fraction", help="Only OCR this fraction of the image height, from the bottom."
    ),
    max_combinations: int | None = typer.Option(None, "--max-combinations"),
):
    config = _correction_config(max_combinations)
    if file.suffix.lower() in TEXT_SUFFIXES:
        result = scan_text(file.read_text(encoding="utf-8"), error_correction=correct, config=config)
    else:
        try:
            result = scan_image(
                file,
                error_correction=correct,
                ocr_config=OCRConfig(bottom_fraction=bottom_fraction),
                ocr_backend=ocr_backend,
                config=config,
            )
        except BackendUnavailable as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=EXIT_CONTRACT) from exc
    if result is None:
        typer.echo("No TD3 MRZ found.", err=True)
        raise typer.Exit(code=EXIT_INVALID)
    typer.echo(json.dumps(result.to_dict(), indent=2))
    if not result.valid:
        raise typer.Exit(code=EXIT_INVALID)


if __name__ == "__main__":
    app()
