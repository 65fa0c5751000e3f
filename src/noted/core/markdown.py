"""Markdown -> HTML for note bodies. Never raises."""

import logging
import warnings
from typing import Optional

import markdown2

logger = logging.getLogger(__name__)

# raw HTML in a body is escaped, not passed through
_markdowner = markdown2.Markdown(
    safe_mode="escape",
    extras=["fenced-code-blocks", "tables", "strike", "cuddled-lists"],
)


def render_markdown(body: Optional[str]) -> str:
    """Render a note body.

    Returns an empty string for a missing body or when the converter blows
    up; warnings emitted while converting are logged and the HTML is kept.
    """
    if body is None:
        return ""

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            html = _markdowner.convert(body)
    except Exception as e:
        logger.error("Error in markdown parsing", extra={"error": repr(e)})
        return ""

    if caught:
        logger.warning(
            "Warnings from markdown parsing",
            extra={"warnings": [str(w.message) for w in caught]},
        )

    return str(html)
