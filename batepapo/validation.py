import re
from typing import Any, List, Optional

import pydantic

from .errors import ValidationError
from .models import MessageIn, ParticipantIn

LIMIT_RE = re.compile(r"^[1-9][0-9]*$")


def _describe(exc: pydantic.ValidationError) -> List[str]:
    out = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        out.append(f"{loc}: {err.get('msg')}")
    return out


def validate_name(data: Any) -> str:
    """Return the trimmed participant name or raise ValidationError."""
    if not isinstance(data, dict):
        raise ValidationError(["body: must be a JSON object"])
    try:
        return ParticipantIn.model_validate(data).name
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(e)) from None


def validate_message(data: Any) -> MessageIn:
    """Check every message rule and report all violations at once."""
    if not isinstance(data, dict):
        raise ValidationError(["body: must be a JSON object"])
    try:
        return MessageIn.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(e)) from None


def validate_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    if not LIMIT_RE.fullmatch(raw):
        raise ValidationError([f"limit: must be a positive integer, got {raw!r}"])
    return int(raw)
