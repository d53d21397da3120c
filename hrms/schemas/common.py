from __future__ import annotations

import re
from datetime import date
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, PositiveInt, StringConstraints

_PHONE_RE = re.compile(r"^\+?[0-9][0-9\s\-().]{5,19}$")


def sanitize_input(value: Any) -> Any:
    """Trim and strip angle brackets from free-text input."""
    if isinstance(value, str):
        return value.strip().replace("<", "").replace(">", "")
    return value


def blank_to_none(value: Any) -> Any:
    """Blank query values (`?to=`) mean "not given"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _phone(value: str) -> str:
    if not _PHONE_RE.match(value):
        raise ValueError("Please provide a valid phone number")
    return value


Sanitized = BeforeValidator(sanitize_input)

Text255 = Annotated[str, Sanitized, StringConstraints(max_length=255)]
Text2000 = Annotated[str, Sanitized, StringConstraints(max_length=2000)]
Code = Annotated[str, Sanitized, StringConstraints(max_length=64, pattern=r"^[A-Za-z0-9_\-]*$")]
Phone = Annotated[str, Sanitized, AfterValidator(_phone)]

BlankAsNone = BeforeValidator(blank_to_none)
OptionalDate = Annotated[date | None, BlankAsNone]
OptionalInt = Annotated[int | None, BlankAsNone]
OptionalPositiveInt = Annotated[PositiveInt | None, BlankAsNone]


class RequestModel(BaseModel):
    """Base for request bodies: unknown keys are ignored, like the forms that post them."""

    model_config = ConfigDict(extra="ignore")

    def to_params(self) -> dict[str, Any]:
        """JSON-safe values (UUIDs, dates, URLs as strings) ready for a procedure call."""
        return self.model_dump(mode="json")
