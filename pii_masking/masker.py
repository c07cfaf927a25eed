"""
String-level masking of PII and secrets found by the pattern catalog.

Stages run in a fixed order, each on the output of the previous one:
1. emails keep two leading characters of the local part and the domain
2. secret/token assignments keep their field name and separators
3. credit cards, connection strings and IPv4 addresses are masked whole

Text already replaced by filler no longer matches later patterns.
"""

from __future__ import annotations

from typing import Optional

from pii_masking.patterns import Detector, get_detector


DEFAULT_MASK_CHAR = "*"

EMAIL_VISIBLE_CHARS = 2
EMAIL_FILLER_LENGTH = 5
SECRET_FILLER_LENGTH = 10
MAX_GENERIC_FILLER_LENGTH = 10

EMAIL_STAGE: Detector = get_detector("email")
SECRET_STAGE: Detector = get_detector("secret_token")

# Generic stages, in the order they are applied after emails and secrets.
GENERIC_STAGES: tuple[Detector, ...] = tuple(
    get_detector(name) for name in ("credit_card", "connection_string", "ipv4")
)


def _mask_char(mask_char: Optional[str]) -> str:
    return DEFAULT_MASK_CHAR if mask_char is None else mask_char


def mask_email(address: str, mask_char: Optional[str] = None) -> str:
    """
    "alex.smith@gmail.com" -> "al*****@gmail.com"

    A local part shorter than two characters is shown as-is before the filler.
    """
    local, _, domain = address.partition("@")
    filler = _mask_char(mask_char) * EMAIL_FILLER_LENGTH
    return f"{local[:EMAIL_VISIBLE_CHARS]}{filler}@{domain}"


def secret_filler(mask_char: Optional[str] = None) -> str:
    return _mask_char(mask_char) * SECRET_FILLER_LENGTH


def generic_filler(matched: str, mask_char: Optional[str] = None) -> str:
    # Capped so long secrets don't reveal their length.
    return _mask_char(mask_char) * min(len(matched), MAX_GENERIC_FILLER_LENGTH)


def mask_emails(text: str, mask_char: Optional[str] = None) -> str:
    return EMAIL_STAGE.pattern.sub(lambda m: mask_email(m.group(0), mask_char), text)


def mask_secret_tokens(text: str, mask_char: Optional[str] = None) -> str:
    filler = secret_filler(mask_char)
    return SECRET_STAGE.pattern.sub(lambda m: m.group("prefix") + filler, text)


def mask_generic(text: str, mask_char: Optional[str] = None) -> str:
    for detector in GENERIC_STAGES:
        text = detector.pattern.sub(lambda m: generic_filler(m.group(0), mask_char), text)
    return text


def mask_string(text: object = "", mask_char: Optional[str] = DEFAULT_MASK_CHAR) -> str:
    """
    Mask every email, secret assignment, card number, connection string and
    IPv4 address in text.

    Never raises: None becomes "" and any other non-str value is passed
    through str() first.

    Example:
        mask_string("Contact: john.doe@test.com") -> "Contact: jo*****@test.com"
        mask_string("Bearer 1a2b3c4d5e6f7g8h9i0j") -> "Bearer **********"
    """
    sanitized = "" if text is None else str(text)
    sanitized = mask_emails(sanitized, mask_char)
    sanitized = mask_secret_tokens(sanitized, mask_char)
    return mask_generic(sanitized, mask_char)
