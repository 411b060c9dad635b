from mrzkit.ocr.registry import (
    BackendUnavailable,
    OCRConfig,
    OCRResult,
    get_backends_for_mode,
    read_mrz_text,
    resolve_backend_mode,
)

__all__ = [
    "BackendUnavailable",
    "OCRConfig",
    "OCRResult",
    "get_backends_for_mode",
    "read_mrz_text",
    "resolve_backend_mode",
]
