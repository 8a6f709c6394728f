"""
Input sanitization helpers shared by request schemas.

Applied by field validators before a payload reaches the service layer:
markup is stripped from every free-text value, personal names keep only
letters and whitespace, identifiers keep only ASCII letters and digits,
and emails are lower-cased. Email format itself is checked by EmailStr.
"""
import html
import re

import bleach

_NOT_NAME = re.compile(r"[^a-zA-ZÀ-ÿ\s]")
_NOT_IDENTIFIER = re.compile(r"[^a-zA-Z0-9]")
_WHITESPACE = re.compile(r"\s+")


def strip_markup(value: str) -> str:
    """
    Remove every HTML tag, keeping the text around and between them.

    bleach escapes the bare `<`, `>` and `&` it leaves behind; values are
    stored and served as plain JSON text, so the escapes are undone.
    """
    return html.unescape(bleach.clean(value, tags=[], strip=True)).strip()


def clean_name(value: str) -> str:
    """Keep letters (including Latin-1 accents) and single spaces."""
    value = _NOT_NAME.sub("", strip_markup(value))
    return _WHITESPACE.sub(" ", value).strip()


def clean_identifier(value: str) -> str:
    return _NOT_IDENTIFIER.sub("", strip_markup(value))


def clean_email(value: str) -> str:
    return value.lower()


def require(value: str, message: str) -> str:
    """Reject values that sanitization reduced to nothing."""
    if not value:
        raise ValueError(message)
    return value
