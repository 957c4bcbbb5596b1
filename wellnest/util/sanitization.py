"""Sanitisation helpers for user-supplied text.

Post and comment bodies, review comments and group descriptions pass
through :func:`strip_tags` before they are stored so that markup never
reaches other users' clients.
"""
import re

TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(text: str | None) -> str:
    """Drop anything that looks like an HTML tag and trim the result.

    Parameters
    ----------
    text: str | None
        Raw text from a request body.

    Returns
    -------
    str
        Plain text; an empty string when ``text`` is empty or ``None``.
    """
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()


def clean_optional(text: str | None) -> str | None:
    """Like :func:`strip_tags` but keeps ``None`` as ``None``."""
    if text is None:
        return None
    return strip_tags(text)


def normalise_email(email: str) -> str:
    return email.strip().lower()
