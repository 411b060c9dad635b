from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Sequence

MRZ_WHITELIST = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<"


class BackendUnavailable(RuntimeError):
    """Raised when an OCR backend cannot run on the current platform."""


@dataclass
class OCRLine:
    text: str
    confidence: float


@dataclass
class OCRResult:
    lines: Sequence[OCRLine]
    avg_conf: float
    engine: str
    elapsed_ms: float

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    def as_dict(self) -> dict:
        return {
            "text": self.text,
            "avg_conf": self.avg_conf,
            "engine": self.engine,
            "elapsed_ms": round(self.elapsed_ms, 2),
            "lines": [{"text": line.text, "confidence": line.confidence} for line in self.lines],
        }


@dataclass
class OCRConfig:
    psm: int = 6
    lang: str = "eng"
    whitelist: str = MRZ_WHITELIST
    # Fraction of the image height, measured from the bottom, that holds the MRZ.
    bottom_fraction: float = 1.0


class OCRBackend(Protocol):
    name: str

    def is_available(self) -> bool: ...

    def read_text(self, path: Path, config: OCRConfig) -> OCRResult: ...


def empty_result(engine: str) -> OCRResult:
    lines: List[OCRLine] = []
    return OCRResult(lines=lines, avg_conf=0.0, engine=engine, elapsed_ms=0.0)


__all__ = [
    "BackendUnavailable",
    "MRZ_WHITELIST",
    "OCRBackend",
    "OCRConfig",
    "OCRLine",
    "OCRResult",
    "empty_result",
]
