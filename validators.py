"""
Field validation for request payloads and query strings.

Each validator inspects a single raw value and returns a FieldResult. A result
is truthy only when the value is valid; `value` then holds the normalized
(trimmed) value. Validators never raise, callers decide whether a field is
required or optional.
"""
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from config import (
    PHONE_LENGTH,
    ID_LENGTH,
    PROTOCOLS,
    CHECK_METHODS,
    MIN_TIMEOUT_SECONDS,
    MAX_TIMEOUT_SECONDS,
)


class FieldResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Any = None
    reason: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.valid


def valid(value: Any) -> FieldResult:
    return FieldResult(value=value)


def invalid(reason: str) -> FieldResult:
    return FieldResult(reason=reason)


def string_field(value: Any, exact_length: Optional[int] = None) -> FieldResult:
    if not isinstance(value, str):
        return invalid("not a string")

    trimmed = value.strip()
    if exact_length is not None:
        if len(trimmed) != exact_length:
            return invalid(f"length must be exactly {exact_length}")
    elif len(trimmed) == 0:
        return invalid("empty")
    return valid(trimmed)


def phone_field(value: Any) -> FieldResult:
    return string_field(value, exact_length=PHONE_LENGTH)


def id_field(value: Any) -> FieldResult:
    """Token and check ids share the same fixed length."""
    return string_field(value, exact_length=ID_LENGTH)


def consent_field(value: Any) -> FieldResult:
    # Only a literal boolean true counts; "true", 1 and False are all absent
    if value is True:
        return valid(True)
    return invalid("must be boolean true")


def enum_field(value: Any, allowed: Iterable[str]) -> FieldResult:
    if not isinstance(value, str):
        return invalid("not a string")

    trimmed = value.strip()
    if trimmed not in allowed:
        return invalid(f"must be one of {', '.join(allowed)}")
    return valid(trimmed)


def protocol_field(value: Any) -> FieldResult:
    return enum_field(value, PROTOCOLS)


def http_method_field(value: Any) -> FieldResult:
    return enum_field(value, CHECK_METHODS)


def timeout_field(value: Any) -> FieldResult:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return invalid("not a number")
    if isinstance(value, float):
        if not value.is_integer():
            return invalid("not a whole number")
        value = int(value)
    if not MIN_TIMEOUT_SECONDS <= value <= MAX_TIMEOUT_SECONDS:
        return invalid(f"must be between {MIN_TIMEOUT_SECONDS} and {MAX_TIMEOUT_SECONDS}")
    return valid(value)


def success_codes_field(value: Any) -> FieldResult:
    if not isinstance(value, (list, tuple)):
        return invalid("not a list")
    if len(value) == 0:
        return invalid("empty")
    return valid(list(value))
