from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable, Dict, List

from mrzkit.ocr.backends.base import BackendUnavailable, OCRBackend, OCRConfig, OCRResult
from mrzkit.ocr.backends.tesseract_backend import TesseractBackend

LOGGER = logging.getLogger(__name__)

_FACTORIES: Dict[str, Callable[[], OCRBackend]] = {
    "tesseract": TesseractBackend,
}

_VALID_MODES = {"auto", "tesseract"}


def resolve_backend_mode(cli_value: str | None) -> str:
    env_mode = os.getenv("MRZKIT_OCR_BACKEND")
    mode = (cli_value or env_mode or "auto").lower()
    return mode if mode in _VALID_MODES else "auto"


def get_backends_for_mode(mode: str) -> List[OCRBackend]:
    order = list(_FACTORIES) if mode == "auto" else [mode]
    backends: List[OCRBackend] = []
    for name in order:
        factory = _FACTORIES.get(name)
        if not factory:
            continue
        backend = factory()
        if backend.is_available():
            backends.append(backend)
    return backends


def read_mrz_text(path: Path, config: OCRConfig | None = None, mode: str | None = None) -> OCRResult:
    """Run the first available backend over an image and return its text."""
    cfg = config or OCRConfig()
    resolved = resolve_backend_mode(mode)
    backends = get_backends_for_mode(resolved)
    if not backends:
        raise BackendUnavailable(f"No OCR backend available for mode {resolved!r}")
    last_error: BackendUnavailable | None = None
    for backend in backends:
        start = time.perf_counter()
        try:
            result = backend.read_text(path, cfg)
        except BackendUnavailable as exc:
            LOGGER.info("OCR backend %s unavailable: %s", backend.name, exc)
            last_error = exc
            continue
        LOGGER.debug(
            "OCR backend %s read %d line(s) in %.1f ms",
            backend.name,
            len(result.lines),
            (time.perf_counter() - start) * 1000.0,
        )
        return result
    raise BackendUnavailable(str(last_error))


__all__ = ["get_backends_for_mode", "read_mrz_text", "resolve_backend_mode"]
