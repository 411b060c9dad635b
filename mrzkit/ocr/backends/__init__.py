from mrzkit.ocr.backends.base import (
    BackendUnavailable,
    OCRBackend,
    OCRConfig,
    OCRLine,
    OCRResult,
)

__all__ = ["BackendUnavailable", "OCRBackend", "OCRConfig", "OCRLine", "OCRResult"]
