from __future__ import annotations

from typing import Sequence

from mrzkit.correction import CorrectionConfig, parse_with_error_correction
from mrzkit.models import ParseResult
from mrzkit.td3 import MRZFormatError, parse_td3


def parse_mrz(
    lines: Sequence[str],
    error_correction: bool = False,
    config: CorrectionConfig | None = None,
) -> ParseResult:
    """Decode a TD3 MRZ given as two lines.

    Without ``error_correction`` both lines must be exactly 44 characters and
    ``MRZFormatError`` is raised otherwise. With it, lines of any length are
    normalised and repaired, and a result is always returned.
    """
    if isinstance(lines, str) or len(lines) != 2:
        count = 1 if isinstance(lines, str) else len(lines)
        raise MRZFormatError(f"TD3 format requires exactly 2 lines, got {count}")
    if error_correction:
        return parse_with_error_correction(lines[0], lines[1], config)
    return parse_td3(list(lines), corrected=False)


__all__ = ["parse_mrz"]
