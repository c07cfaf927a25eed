"""
Recursive masking of arbitrary nested data (mappings, lists, tuples, scalars).

For every mapping key that looks sensitive (contains "password", "token",
"secret", "key" or "pwd", case-insensitive) the whole value is replaced by a
placeholder, whatever its shape. Every other value is walked; string leaves
go through mask_string.

The input is never mutated: each container visited is rebuilt in the output.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, TypedDict
import logging

from pii_masking.masker import DEFAULT_MASK_CHAR, mask_string
from pii_masking.patterns import is_sensitive_key


logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "[REDACTED]"


class MaskOptions(TypedDict, total=False):
    placeholder: str
    mask_char: str


class CircularReferenceError(ValueError):
    """Raised when a container (directly or indirectly) contains itself."""


class Shape(Enum):
    NULL = "null"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify_shape(value: Any) -> Shape:
    if value is None:
        return Shape.NULL
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    return Shape.SCALAR


def _option(options: Optional[Mapping[str, Any]], name: str, default: str) -> str:
    if not options:
        return default
    value = options.get(name)
    return default if value is None else value


def mask_tree(
    data: Any,
    options: Optional[MaskOptions] = None,
    *,
    keep_scalars: bool = False,
) -> Any:
    """
    Return a masked copy of data.

    Args:
        data: Scalar, mapping, list or tuple, arbitrarily nested.
        options: Optional MaskOptions ("placeholder", "mask_char").
        keep_scalars: If True, None and non-string scalars are returned as-is
            instead of being turned into (masked) strings.

    Raises:
        CircularReferenceError: data contains itself.
    """
    return _walk(data, options, set(), keep_scalars)


def _walk(data: Any, options: Optional[MaskOptions], active: set[int], keep_scalars: bool) -> Any:
    shape = classify_shape(data)

    if shape is Shape.NULL:
        return None if keep_scalars else ""
    if shape is Shape.SCALAR:
        if keep_scalars and not isinstance(data, str):
            return data
        return mask_string(str(data), _option(options, "mask_char", DEFAULT_MASK_CHAR))

    # Ids of the containers on the current path only: shared sub-trees are
    # fine, only re-entering an ancestor is a cycle.
    marker = id(data)
    if marker in active:
        logger.debug("Circular reference in %s", type(data).__name__)
        raise CircularReferenceError(f"circular reference detected in {type(data).__name__}")
    active.add(marker)
    try:
        if shape is Shape.SEQUENCE:
            items = [_walk(item, options, active, keep_scalars) for item in data]
            return tuple(items) if isinstance(data, tuple) else items

        out: dict[Any, Any] = {}
        for key, value in data.items():
            if is_sensitive_key(key):
                out[key] = _option(options, "placeholder", DEFAULT_PLACEHOLDER)
            else:
                out[key] = _walk(value, options, active, keep_scalars)
        return out
    finally:
        active.discard(marker)


def hide_pii(data: Any, options: Optional[MaskOptions] = None) -> Any:
    """
    Recursively mask PII and secrets in data.

    - Values under sensitive keys (password, token, secret, key, pwd) are
      replaced by options["placeholder"] (default "[REDACTED]"), never walked.
    - Strings are masked with options["mask_char"] (default "*").
    - Mappings become dicts, lists stay lists, tuples stay tuples.
    - A non-container input always comes back as a string: None -> "",
      42 -> "42".

    Example:
        hide_pii({"password": "x", "email": "dev@test.local"})
        -> {"password": "[REDACTED]", "email": "de*****@test.local"}
    """
    return mask_tree(data, options, keep_scalars=False)
