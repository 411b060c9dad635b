from __future__ import annotations

import time
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Tuple

import pytesseract
from PIL import Image, ImageOps
from pytesseract import Output

from mrzkit.ocr.backends.base import (
    BackendUnavailable,
    OCRBackend,
    OCRConfig,
    OCRLine,
    OCRResult,
    empty_result,
)


class TesseractBackend(OCRBackend):
    name = "tesseract"

    def is_available(self) -> bool:
        try:
            pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError:
            return False
        return True

    def read_text(self, path: Path, config: OCRConfig) -> OCRResult:
        if not self.is_available():
            raise BackendUnavailable("tesseract binary not found on PATH")
        image = load_mrz_region(path, config.bottom_fraction)
        if image.width == 0 or image.height == 0:
            return empty_result(self.name)
        cfg_parts = [f"--psm {config.psm}"]
        if config.lang:
            cfg_parts.append(f"-l {config.lang}")
        if config.whitelist:
            cfg_parts.append(f"-c tessedit_char_whitelist={config.whitelist}")
        t0 = time.perf_counter()
        data = pytesseract.image_to_data(image, output_type=Output.DICT, config=" ".join(cfg_parts))
        elapsed = (time.perf_counter() - t0) * 1000.0
        lines = _group_lines(data)
        confidences = [line.confidence for line in lines]
        avg_conf = sum(confidences) / len(confidences) if confidences else 0.0
        return OCRResult(lines=lines, avg_conf=avg_conf, engine=self.name, elapsed_ms=elapsed)


def load_mrz_region(path: Path, bottom_fraction: float = 1.0) -> Image.Image:
    image = Image.open(str(path))
    image = ImageOps.exif_transpose(image)
    image = image.convert("L")
    fraction = max(0.0, min(bottom_fraction, 1.0))
    if 0.0 < fraction < 1.0:
        top = int(image.height * (1.0 - fraction))
        image = image.crop((0, top, image.width, image.height))
    return image


def _group_lines(data: Dict[str, list]) -> List[OCRLine]:
    # Tesseract splits MRZ lines into words on long filler runs; words are
    # rejoined without spaces per (block, paragraph, line).
    grouped: "OrderedDict[Tuple[int, int, int], List[Tuple[str, float]]]" = OrderedDict()
    for idx, text in enumerate(data.get("text", [])):
        cleaned = (text or "").strip()
        if not cleaned:
            continue
        try:
            conf_raw = float(data.get("conf", [0])[idx])
        except (ValueError, TypeError):
            conf_raw = 0.0
        key = (
            int(data.get("block_num", [0])[idx]),
            int(data.get("par_num", [0])[idx]),
            int(data.get("line_num", [0])[idx]),
        )
        grouped.setdefault(key, []).append((cleaned, max(0.0, min(conf_raw / 100.0, 1.0))))
    lines: List[OCRLine] = []
    for words in grouped.values():
        text = "".join(word for word, _ in words)
        confidence = sum(conf for _, conf in words) / len(words)
        lines.append(OCRLine(text=text, confidence=confidence))
    return lines


__all__ = ["TesseractBackend", "load_mrz_region"]
