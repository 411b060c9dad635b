from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from mrzkit import ENGINE_VERSION
from mrzkit.correction import CorrectionConfig, resolve_max_combinations
from mrzkit.create import create_mrz
from mrzkit.models import MRZInput
from mrzkit.parse import parse_mrz
from mrzkit.scan import scan_text
from mrzkit.td3 import MRZFormatError

app = FastAPI(title=f"mrzkit v{ENGINE_VERSION}")


class ParseRequest(BaseModel):
    line1: str
    line2: str
    error_correction: bool = False
    max_combinations: Optional[int] = None


class DateBody(BaseModel):
    year: int
    month: int
    day: int


class CreateRequest(BaseModel):
    document_code: str = "P"
    issuing_state: str
    last_name: str
    first_name: str
    document_number: str
    nationality: str
    birth_date: DateBody
    sex: str = "unspecified"
    expiration_date: DateBody
    personal_number: Optional[str] = None


class ScanRequest(BaseModel):
    text: str
    error_correction: bool = True
    max_combinations: Optional[int] = None


@app.post("/v1/parse")
def parse(body: ParseRequest):
    config = CorrectionConfig(max_combinations=resolve_max_combinations(body.max_combinations))
    try:
        result = parse_mrz((body.line1, body.line2), error_correction=body.error_correction, config=config)
    except MRZFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return result.to_dict()


@app.post("/v1/create")
def create(body: CreateRequest):
    try:
        line1, line2 = create_mrz(MRZInput.from_dict(body.model_dump()))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"line1": line1, "line2": line2}


@app.post("/v1/scan")
def scan(body: ScanRequest):
    config = CorrectionConfig(max_combinations=resolve_max_combinations(body.max_combinations))
    result = scan_text(body.text, error_correction=body.error_correction, config=config)
    if result is None:
        raise HTTPException(status_code=404, detail="No TD3 MRZ found")
    return result.to_dict()


__all__ = ["app"]
