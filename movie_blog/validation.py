"""
Movie Blog API - Post Payload Validation
=========================================

What:  Field-level checks for the create and update request bodies.
How:   Each check is a pure function `(value) -> ValidationResult`. A field's
       checks run in order and stop at the first failure; every field is
       checked independently, so one response reports all bad fields at once.
       `validate_post_payload()` composes them and either returns a
       PostPayload or raises ValidationError.

Nothing here touches HTTP or the database.
"""

import re
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import AnyUrl, TypeAdapter, UrlConstraints
from pydantic import ValidationError as PydanticValidationError

from movie_blog.exceptions import ValidationError
from movie_blog.schemas.post import PostPayload


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single field check; `reason` is set only on failure."""
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str) -> "ValidationResult":
        return cls(ok=False, reason=reason)


FieldCheck = Callable[[Any], ValidationResult]

# Absolute URLs only: scheme and host are both required.
_ImageUrl = Annotated[
    AnyUrl,
    UrlConstraints(allowed_schemes=["http", "https", "ftp"], host_required=True),
]
_image_url_adapter = TypeAdapter(_ImageUrl)

# The URL parser silently drops tabs and newlines, so whitespace and angle
# brackets are rejected before it sees the value.
_FORBIDDEN_URL_CHARS = re.compile(r"[\s<>]")


def check_non_empty_string(value: Any) -> ValidationResult:
    """Value must be a string containing at least one non-whitespace character."""
    if value is None:
        return ValidationResult.failed("field is required")
    if not isinstance(value, str):
        return ValidationResult.failed("must be a string")
    if not value.strip():
        return ValidationResult.failed("must not be empty")
    return ValidationResult.passed()


def check_url(value: Any) -> ValidationResult:
    """Value must parse as an absolute http, https or ftp URL."""
    if not isinstance(value, str) or _FORBIDDEN_URL_CHARS.search(value):
        return ValidationResult.failed("must be a valid absolute URL")
    try:
        _image_url_adapter.validate_python(value)
    except PydanticValidationError:
        return ValidationResult.failed("must be a valid absolute URL")
    return ValidationResult.passed()


POST_FIELD_RULES: Dict[str, Sequence[FieldCheck]] = {
    "title": (check_non_empty_string,),
    "imgSrc": (check_non_empty_string, check_url),
    "pelicula": (check_non_empty_string,),
    "content": (check_non_empty_string,),
}


def validate_field(value: Any, checks: Sequence[FieldCheck]) -> ValidationResult:
    """Run `checks` in order against one value, returning the first failure."""
    for check in checks:
        result = check(value)
        if not result.ok:
            return result
    return ValidationResult.passed()


def collect_violations(payload: Any) -> List[Dict[str, str]]:
    """
    Check every post field in `payload` and list the failures.

    A payload that is not a JSON object yields a single `body` violation.

    Returns:
        [{"field": ..., "message": ...}, ...] in field declaration order;
        empty when the payload is valid.
    """
    if not isinstance(payload, Mapping):
        return [{"field": "body", "message": "request body must be a JSON object"}]

    violations = []
    for field, checks in POST_FIELD_RULES.items():
        result = validate_field(payload.get(field), checks)
        if not result.ok:
            violations.append({"field": field, "message": result.reason})
    return violations


def validate_post_payload(payload: Any) -> PostPayload:
    """
    Validate a create/update body and return its four fields.

    Unknown keys are ignored. Values are passed through as received; they are
    not trimmed or normalized.

    Raises:
        ValidationError: one or more fields failed their checks
    """
    violations = collect_violations(payload)
    if violations:
        raise ValidationError(violations)
    return PostPayload(**{field: payload[field] for field in POST_FIELD_RULES})
