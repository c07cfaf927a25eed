"""
Line-by-line findings report for the masking detectors.

Each line is masked stage by stage exactly as mask_string does it (email,
secret token, credit card, connection string, IPv4), every stage running on
the previous stage's output. A finding records what its stage replaced:
- a later replacement that swallows an earlier finding absorbs it
  (an email inside a connection string is reported as the connection string)
- a later replacement inside an earlier finding is folded into its masked text

So every reported masked value is a substring of mask_string(line), and
start/end locate it there.

Returns structured matches with: type, replaced text, masked value, file, line number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Sequence, TypedDict, Union
import io
import logging
import re

from pii_masking.file_scanner import LineRecord, PathLike, scan_paths, scan_text_stream
from pii_masking.masker import (
    DEFAULT_MASK_CHAR,
    EMAIL_STAGE,
    GENERIC_STAGES,
    SECRET_STAGE,
    generic_filler,
    mask_email,
    secret_filler,
)
from pii_masking.patterns import Detector, DetectorName


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PiiMatch:
    pii_type: DetectorName
    value: str
    masked: str
    filename: str
    line_number: int
    start: int
    end: int


class PiiDict(TypedDict):
    type: DetectorName
    value: str
    masked: str
    file: str
    line_number: int


@dataclass(slots=True)
class _Finding:
    pii_type: DetectorName
    value: str
    start: int
    end: int


# (detector, group replaced, replacement for the match)
_Stage = tuple[Detector, Union[int, str], Callable[[re.Match[str]], str]]


def _stages(mask_char: str) -> list[_Stage]:
    # Secrets: only the value is replaced; the field name stays readable.
    stages: list[_Stage] = [
        (EMAIL_STAGE, 0, lambda m: mask_email(m.group(0), mask_char)),
        (SECRET_STAGE, "secret_value", lambda m: secret_filler(mask_char)),
    ]
    for detector in GENERIC_STAGES:
        stages.append((detector, 0, lambda m: generic_filler(m.group(0), mask_char)))
    return stages


def _apply_stage(text: str, findings: list[_Finding], stage: _Stage) -> str:
    detector, group, replacement = stage
    edits = [(*m.span(group), m.group(group), replacement(m)) for m in detector.find_all(text)]
    if not edits:
        return text

    def shift_before(pos: int) -> int:
        return sum(len(new) - (e - s) for s, e, _old, new in edits if e <= pos)

    def swallows(f: _Finding, s: int, e: int) -> bool:
        # Overlapping and not strictly inside the finding.
        inside = f.start <= s and e <= f.end and (e - s) < (f.end - f.start)
        return s < f.end and f.start < e and not inside

    kept: list[_Finding] = []
    for f in findings:
        if any(swallows(f, s, e) for s, e, _old, _new in edits):
            continue
        f.start, f.end = f.start + shift_before(f.start), f.end + shift_before(f.end)
        kept.append(f)

    pieces: list[str] = []
    cursor = 0
    for s, e, old, new in edits:
        pieces.append(text[cursor:s])
        start = s + shift_before(s)
        kept.append(_Finding(detector.name, old, start, start + len(new)))
        pieces.append(new)
        cursor = e
    pieces.append(text[cursor:])

    findings[:] = kept
    return "".join(pieces)


def _iter_matches_for_line(
    filename: str,
    line_number: int,
    line: str,
    mask_char: str,
) -> Iterator[PiiMatch]:
    findings: list[_Finding] = []
    masked = line
    for stage in _stages(mask_char):
        masked = _apply_stage(masked, findings, stage)

    for f in findings:
        yield PiiMatch(f.pii_type, f.value, masked[f.start:f.end], filename, line_number, f.start, f.end)


def detect_pii(records: Iterable[LineRecord], *, mask_char: Optional[str] = None) -> Iterator[PiiMatch]:
    """
    Detect PII in an iterable of LineRecord items.
    """
    char = DEFAULT_MASK_CHAR if mask_char is None else mask_char
    for r in records:
        yield from _iter_matches_for_line(r.filename, r.line_number, r.line, char)


def detect_pii_in_text(
    text: str,
    *,
    filename: str = "<text>",
    mask_char: Optional[str] = None,
) -> list[PiiMatch]:
    """
    Convenience wrapper for text already in memory (e.g. a pasted log excerpt).
    """
    return list(detect_pii(scan_text_stream(io.StringIO(text), filename=filename), mask_char=mask_char))


def pii_match_to_dict(match: PiiMatch) -> PiiDict:
    """
    Convert a structured PiiMatch into a plain dictionary for easy downstream use.

    The dict still carries the replaced text; pass it through
    utils.log_sanitize.sanitize_for_log before logging it.
    """
    return {
        "type": match.pii_type,
        "value": match.value,
        "masked": match.masked,
        "file": match.filename,
        "line_number": match.line_number,
    }


def pii_matches_to_dicts(matches: Iterable[PiiMatch]) -> list[PiiDict]:
    return [pii_match_to_dict(m) for m in matches]


def detect_pii_dicts(records: Iterable[LineRecord], *, mask_char: Optional[str] = None) -> list[PiiDict]:
    return pii_matches_to_dicts(detect_pii(records, mask_char=mask_char))


def detect_pii_in_paths(
    paths: Sequence[PathLike],
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    mask_char: Optional[str] = None,
) -> Iterator[PiiMatch]:
    """
    Convenience wrapper to scan files from disk and detect PII.
    """
    logger.debug("Detecting PII in %d path(s)", len(paths))
    return detect_pii(scan_paths(paths, encoding=encoding, errors=errors), mask_char=mask_char)


def detect_pii_dicts_in_paths(
    paths: Sequence[PathLike],
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    mask_char: Optional[str] = None,
) -> list[PiiDict]:
    return pii_matches_to_dicts(
        detect_pii_in_paths(paths, encoding=encoding, errors=errors, mask_char=mask_char)
    )
