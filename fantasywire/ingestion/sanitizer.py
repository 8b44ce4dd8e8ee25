"""Repairs for the malformed markup publishers routinely serve as feeds."""

import re

# & that does not start one of the XML predefined entities or a numeric reference
_BARE_AMPERSAND = re.compile(r"&(?!(?:amp|lt|gt|quot|apos|#\d+|#[xX][0-9a-fA-F]+);)")

# C0 controls except tab, LF and CR, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def escape_bare_ampersands(text: str) -> str:
    """Escape every ``&`` that is not already part of a recognized entity."""
    return _BARE_AMPERSAND.sub("&amp;", text)


def strip_control_chars(text: str) -> str:
    """Drop characters XML 1.0 does not allow."""
    return _CONTROL_CHARS.sub("", text)


def sanitize_feed_text(text: str) -> str:
    """Make feed text parseable: strip a BOM, control characters and bare ``&``."""
    if not text:
        return ""
    text = text.lstrip("\ufeff")
    text = strip_control_chars(text)
    return escape_bare_ampersands(text)
