"""
Recursive PII and secret masking for log payloads, error reports and telemetry.

    from pii_masking import hide_pii

    hide_pii({"password": "x", "email": "dev@test.local"})
    # {"password": "[REDACTED]", "email": "de*****@test.local"}
"""

from pii_masking.walker import (
    DEFAULT_PLACEHOLDER,
    CircularReferenceError,
    MaskOptions,
    hide_pii,
    mask_tree,
)
from pii_masking.masker import DEFAULT_MASK_CHAR, mask_string

__all__ = [
    "DEFAULT_MASK_CHAR",
    "DEFAULT_PLACEHOLDER",
    "CircularReferenceError",
    "MaskOptions",
    "hide_pii",
    "mask_string",
    "mask_tree",
]
