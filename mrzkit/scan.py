from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from mrzkit.correction import CorrectionConfig
from mrzkit.models import ParseResult
from mrzkit.ocr import OCRConfig, read_mrz_text
from mrzkit.parse import parse_mrz
from mrzkit.td3 import MRZFormatError

LOGGER = logging.getLogger(__name__)

# Lowercase l survives normalisation so the correction search can map it to 1.
MRZ_LINE_RE = re.compile(r"^[A-Z0-9<l]{30,50}$")
MIN_FILLER = 2

# Glyphs OCR tends to return in place of the filler.
_FILLER_LOOKALIKES = str.maketrans({"«": "<", "‹": "<", "≤": "<"})


def normalize_line(line: str) -> str:
    cleaned = line.strip().translate(_FILLER_LOOKALIKES).replace(" ", "")
    return "".join(ch if ch == "l" else ch.upper() for ch in cleaned)


def find_td3_candidates(text: str) -> List[Tuple[str, str]]:
    """Pairs of consecutive MRZ-looking lines where the first starts with ``P``."""
    if not text:
        return []
    lines = [normalize_line(line) for line in text.splitlines() if line.strip()]
    matched = [line for line in lines if MRZ_LINE_RE.match(line) and line.count("<") >= MIN_FILLER]
    pairs: List[Tuple[str, str]] = []
    for first, second in zip(matched, matched[1:]):
        if first.lstrip("<").startswith("P"):
            pairs.append((first, second))
    return pairs


def scan_text(
    text: str,
    error_correction: bool = True,
    config: CorrectionConfig | None = None,
) -> Optional[ParseResult]:
    """Decode the first valid TD3 MRZ found in free text.

    Falls back to the first candidate's (invalid) result so callers still get
    per-field diagnostics. Returns ``None`` when nothing looks like an MRZ.
    """
    first_result: Optional[ParseResult] = None
    for line1, line2 in find_td3_candidates(text):
        try:
            result = parse_mrz((line1, line2), error_correction=error_correction, config=config)
        except MRZFormatError as exc:
            LOGGER.debug("Skipping MRZ candidate: %s", exc)
            continue
        if result.valid:
            return result
        if first_result is None:
            first_result = result
    return first_result


def scan_image(
    path: Path,
    error_correction: bool = True,
    ocr_config: OCRConfig | None = None,
    ocr_backend: str | None = None,
    config: CorrectionConfig | None = None,
) -> Optional[ParseResult]:
    ocr_result = read_mrz_text(Path(path), ocr_config, ocr_backend)
    LOGGER.debug("OCR (%s) returned %d line(s), avg_conf=%.2f", ocr_result.engine, len(ocr_result.lines), ocr_result.avg_conf)
    return scan_text(ocr_result.text, error_correction=error_correction, config=config)


__all__ = ["find_td3_candidates", "normalize_line", "scan_image", "scan_text"]
