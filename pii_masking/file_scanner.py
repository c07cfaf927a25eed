"""
Line-by-line reading and masking of log and text files.

Core API:
- scan_text_stream / scan_path / scan_paths / scan_bytes: iterate LineRecords
- mask_records: mask each record's line with mask_string
- mask_text / mask_file: masked copy of a whole text, line endings kept
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union
import io
import logging

from pii_masking.masker import mask_string


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LineRecord:
    filename: str
    line_number: int
    line: str


PathLike = Union[str, Path]


def scan_text_stream(
    stream: TextIO,
    *,
    filename: str = "<stream>",
    start_line: int = 1,
    keep_newline: bool = False,
) -> Iterator[LineRecord]:
    """
    Yield LineRecord items from a text stream, line by line.

    Args:
        stream: A text-mode, file-like object (must yield str lines).
        filename: Label to attach to returned records.
        start_line: First line number to use (default 1).
        keep_newline: If False, strips a trailing "\\n" or "\\r\\n" from each line.
    """
    if start_line < 1:
        raise ValueError("start_line must be >= 1")

    for line_no, raw in enumerate(stream, start=start_line):
        line = raw if keep_newline else raw.rstrip("\r\n")
        yield LineRecord(filename=filename, line_number=line_no, line=line)


def scan_path(
    path: PathLike,
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    keep_newline: bool = False,
    start_line: int = 1,
) -> Iterator[LineRecord]:
    """
    Yield LineRecord items from a file path. Raises FileNotFoundError for a
    missing path once iteration starts.
    """
    p = Path(path)
    with p.open("r", encoding=encoding, errors=errors, newline="") as f:
        yield from scan_text_stream(f, filename=str(p), start_line=start_line, keep_newline=keep_newline)


def scan_paths(
    paths: Iterable[PathLike],
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    keep_newline: bool = False,
    start_line: int = 1,
    skip_missing: bool = False,
) -> Iterator[LineRecord]:
    """
    Yield LineRecord items from multiple paths, in order.

    skip_missing: If True, missing paths are ignored; otherwise FileNotFoundError is raised.
    """
    for path in paths:
        p = Path(path)
        if skip_missing and not p.exists():
            logger.debug("Skipping missing path %s", p)
            continue
        yield from scan_path(p, encoding=encoding, errors=errors, keep_newline=keep_newline, start_line=start_line)


def scan_bytes(
    data: bytes,
    *,
    filename: str = "<bytes>",
    encoding: str = "utf-8",
    errors: str = "replace",
    keep_newline: bool = False,
    start_line: int = 1,
) -> Iterator[LineRecord]:
    """
    Same as scan_text_stream for content already in memory as bytes (uploads).
    """
    text = data.decode(encoding, errors=errors)
    return scan_text_stream(
        io.StringIO(text, newline=""),
        filename=filename,
        start_line=start_line,
        keep_newline=keep_newline,
    )


def mask_records(records: Iterable[LineRecord], mask_char: Optional[str] = None) -> Iterator[LineRecord]:
    """
    Yield a copy of each record with its line masked.
    """
    for r in records:
        yield replace(r, line=mask_string(r.line, mask_char))


def mask_text(text: str, mask_char: Optional[str] = None) -> str:
    """
    Mask text line by line, keeping the original line endings.
    """
    records = scan_text_stream(io.StringIO(text, newline=""), filename="<text>", keep_newline=True)
    return "".join(r.line for r in mask_records(records, mask_char))


def mask_file(
    path: PathLike,
    *,
    mask_char: Optional[str] = None,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> str:
    """
    Return the masked contents of a text file. The file itself is not modified.
    """
    records = scan_path(path, encoding=encoding, errors=errors, keep_newline=True)
    masked = "".join(r.line for r in mask_records(records, mask_char))
    logger.debug("Masked file %s", path)
    return masked
