"""
Keep PII and secrets out of log output.

Privacy & legal motivation:
- Logs may be persisted or shared; logging raw PII or credentials extends
  retention and creates compliance risk. This module masks log payloads
  before they are formatted, using the same rules as hide_pii.

Three entry points:
- sanitize_for_log(obj): masked copy of a structure; numbers, booleans and
  None keep their type so structured logs stay queryable
- PiiRedactingFilter: logging.Filter that masks the message and its args
- redact_event_dict: structlog processor with the same behaviour
"""

from __future__ import annotations

from typing import Any, MutableMapping, Optional
import logging

from pii_masking.masker import mask_string
from pii_masking.walker import MaskOptions, mask_tree


def sanitize_for_log(obj: Any, options: Optional[MaskOptions] = None) -> Any:
    """
    Return a copy of obj safe for logging: values under sensitive keys are
    replaced by the placeholder and strings are masked. Nested dicts, lists
    and tuples are processed recursively.

    Use this whenever you log structures that might contain PII (e.g. the
    dicts from pii_detector.detect_pii_dicts).
    """
    return mask_tree(obj, options, keep_scalars=True)


class PiiRedactingFilter(logging.Filter):
    """
    Masks the record's message in place. Never drops a record.

    String messages are %-formatted first and masked afterwards, so a secret
    split between the format string and its args is still caught; the record
    is left with no args. If formatting fails, the format string and args
    are masked separately and the failure surfaces in the handler as usual.
    Non-string messages (e.g. a dict) are sanitized like any other payload.
    """

    def __init__(self, name: str = "", options: Optional[MaskOptions] = None) -> None:
        super().__init__(name)
        self.options: MaskOptions = options or {}

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            try:
                message = record.getMessage()
            except (TypeError, ValueError):
                # Bad format/args pair: leave the error to Handler.handleError.
                record.msg = mask_string(record.msg, self.options.get("mask_char"))
                if record.args:
                    record.args = sanitize_for_log(record.args, self.options)
            else:
                record.msg = mask_string(message, self.options.get("mask_char"))
                record.args = ()
        else:
            record.msg = sanitize_for_log(record.msg, self.options)
            if record.args:
                record.args = sanitize_for_log(record.args, self.options)
        return True


def install_redacting_filter(
    logger: Optional[logging.Logger] = None,
    options: Optional[MaskOptions] = None,
) -> PiiRedactingFilter:
    """
    Attach one PiiRedactingFilter to every handler of logger (root by default).

    Handler filters also apply to records propagated from child loggers.
    """
    target = logger if logger is not None else logging.getLogger()
    pii_filter = PiiRedactingFilter(options=options)
    for handler in target.handlers:
        handler.addFilter(pii_filter)
    return pii_filter


def redact_event_dict(_logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]) -> dict:
    """
    Structlog processor: mask PII in event_dict.
    """
    return sanitize_for_log(event_dict)
