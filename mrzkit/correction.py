from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from itertools import combinations, product
from typing import Iterator, List, Sequence, Tuple

from mrzkit.checkdigit import FILLER, TD3_LINE_LENGTH, fast_validate_td3_check_digits
from mrzkit.models import CorrectionMetrics, ParseResult
from mrzkit.td3 import parse_td3

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATIONS = 2_000_000

# Characters OCR commonly misreads, mapped to what they were probably meant to be.
# Directional on purpose: 7 and Z may be a misread 2, never the other way round.
AMBIGUOUS_CHARS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("S", ("5",)),
    ("5", ("S",)),
    ("I", ("1", "l")),
    ("1", ("I",)),
    ("O", ("0",)),
    ("0", ("O",)),
    ("B", ("8",)),
    ("8", ("B",)),
    ("l", ("1", "I")),
    ("Z", ("2",)),
    ("7", ("2",)),
    ("G", ("6",)),
)
_AMBIGUOUS_LOOKUP = dict(AMBIGUOUS_CHARS)

LEADING_FILLER_RE = re.compile(r"^<+")


@dataclass
class CorrectionConfig:
    max_combinations: int = DEFAULT_MAX_COMBINATIONS


def resolve_max_combinations(value: int | None = None) -> int:
    """Explicit value, then ``MRZKIT_MAX_COMBINATIONS``, then the default."""
    if value is not None and value > 0:
        return value
    env_value = os.getenv("MRZKIT_MAX_COMBINATIONS")
    if env_value:
        try:
            parsed = int(env_value)
        except ValueError:
            LOGGER.warning("Ignoring invalid MRZKIT_MAX_COMBINATIONS=%r", env_value)
            return DEFAULT_MAX_COMBINATIONS
        if parsed > 0:
            return parsed
        LOGGER.warning("Ignoring non-positive MRZKIT_MAX_COMBINATIONS=%r", env_value)
    return DEFAULT_MAX_COMBINATIONS


@dataclass(frozen=True)
class AmbiguousPosition:
    pos: int
    original: str
    alternatives: Tuple[str, ...]


def pad_mrz_line(line: str, target_length: int = TD3_LINE_LENGTH, is_line2: bool = False) -> str:
    """Strip leading filler, then pad or truncate to ``target_length``.

    On line 2 a non-filler tail of two characters is taken to be the personal
    number and composite check digits, so the length is fixed just before it.
    """
    line = LEADING_FILLER_RE.sub("", line)
    if len(line) == target_length:
        return line

    if is_line2 and len(line) >= 2:
        tail = line[-2:]
        if tail != FILLER * 2:
            body = line[:-2]
            needed = target_length - 2
            if len(body) < needed:
                return body + FILLER * (needed - len(body)) + tail
            excess = len(body) - needed
            trailing_filler = len(body) - len(body.rstrip(FILLER))
            if trailing_filler >= excess:
                return body[: len(body) - excess] + tail
            # Not enough filler to drop: cut the body short, keep the tail.
            return body[:needed] + tail

    if len(line) < target_length:
        return line + FILLER * (target_length - len(line))
    return line[:target_length]


def find_ambiguous_positions(line: str) -> List[AmbiguousPosition]:
    return [
        AmbiguousPosition(pos=idx, original=ch, alternatives=_AMBIGUOUS_LOOKUP[ch])
        for idx, ch in enumerate(line)
        if ch in _AMBIGUOUS_LOOKUP
    ]


def count_combinations(positions: Sequence[AmbiguousPosition], cap: int) -> int:
    total = 1
    for position in positions:
        total *= 1 + len(position.alternatives)
        if total >= cap:
            return cap
    return total


def generate_candidates(
    line1: str,
    line2: str,
    positions: Sequence[AmbiguousPosition],
    max_combinations: int = DEFAULT_MAX_COMBINATIONS,
) -> Iterator[Tuple[str, str, int]]:
    """Yield ``(line1, line2, edits)`` lazily, fewest substitutions first.

    The unmodified pair comes first, then every single-position substitution,
    then every pair of positions, and so on. Generation stops after
    ``max_combinations`` candidates.
    """
    yield line1, line2, 0
    yielded = 1
    count = len(positions)
    for edits in range(1, count + 1):
        for chosen in combinations(positions, edits):
            for replacement in product(*(position.alternatives for position in chosen)):
                if yielded >= max_combinations:
                    return
                chars = list(line2)
                for position, ch in zip(chosen, replacement):
                    chars[position.pos] = ch
                yield line1, "".join(chars), edits
                yielded += 1


def parse_with_error_correction(line1: str, line2: str, config: CorrectionConfig | None = None) -> ParseResult:
    cfg = config or CorrectionConfig(max_combinations=resolve_max_combinations())
    max_combinations = max(1, cfg.max_combinations)

    line1_padded = pad_mrz_line(line1)
    line2_padded = pad_mrz_line(line2, is_line2=True)
    padding_applied = line1 != line1_padded or line2 != line2_padded

    positions = find_ambiguous_positions(line2_padded)
    theoretical = count_combinations(positions, max_combinations)
    LOGGER.debug(
        "Correction search: %d ambiguous positions, %d combinations (padding_applied=%s)",
        len(positions),
        theoretical,
        padding_applied,
    )

    attempts = 0
    for cand1, cand2, edits in generate_candidates(line1_padded, line2_padded, positions, max_combinations):
        attempts += 1
        if not fast_validate_td3_check_digits(cand2):
            continue
        corrected = padding_applied or cand1 != line1_padded or cand2 != line2_padded
        try:
            result = parse_td3([cand1, cand2], corrected=corrected)
        except Exception as exc:  # a crashing candidate must not end the search
            LOGGER.debug("Candidate %d rejected by decoder: %s", attempts, exc)
            continue
        if not result.valid:
            continue
        LOGGER.debug("Correction search succeeded on attempt %d with %d edit(s)", attempts, edits)
        result.correction_metrics = CorrectionMetrics(
            attempt_number=attempts,
            total_attempts=attempts,
            total_combinations=1 if attempts == 1 else theoretical,
            correction_applied=corrected,
        )
        return result

    LOGGER.debug("Correction search exhausted after %d attempts", attempts)
    failed = parse_td3([line1_padded, line2_padded], corrected=padding_applied)
    failed.correction_metrics = CorrectionMetrics(
        attempt_number=0,
        total_attempts=attempts,
        total_combinations=theoretical,
        correction_applied=padding_applied,
    )
    return failed


__all__ = [
    "AMBIGUOUS_CHARS",
    "AmbiguousPosition",
    "CorrectionConfig",
    "DEFAULT_MAX_COMBINATIONS",
    "count_combinations",
    "find_ambiguous_positions",
    "generate_candidates",
    "pad_mrz_line",
    "parse_with_error_correction",
    "resolve_max_combinations",
]
