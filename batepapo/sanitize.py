"""Markup stripping for user-supplied text fields."""
import logging
from typing import Any, Dict, Iterable

from bs4 import BeautifulSoup

from .errors import InternalError

logger = logging.getLogger("batepapo.sanitize")


def strip_markup(text: str) -> str:
    """Return ``text`` with any HTML removed and surrounding whitespace trimmed."""
    # get_text decodes entities, so escaped markup can reappear; strip until stable
    while "<" in text or "&" in text:
        cleaned = BeautifulSoup(text, "html.parser").get_text()
        if cleaned == text:
            break
        text = cleaned
    return text.strip()


def sanitize_fields(data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Copy ``data`` with every string-valued field in ``fields`` cleaned.

    Non-string values are passed through untouched so validation can report them.
    """
    out = dict(data)
    for key in fields:
        value = out.get(key)
        if not isinstance(value, str):
            continue
        try:
            out[key] = strip_markup(value)
        except Exception as e:
            logger.exception("failed to sanitize field %s", key)
            raise InternalError(f"could not sanitize field '{key}'") from e
    return out
