"""Problem details (RFC 7807) payloads for rejected requests."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field

UNPROCESSABLE_ENTITY = 422
PROBLEM_JSON = "application/problem+json"
VALIDATION_PROBLEM_TYPE = "https://tools.ietf.org/html/rfc4918#section-11.2"
VALIDATION_PROBLEM_TITLE = "One or more validation errors occurred."
VALIDATION_PROBLEM_DETAIL = "See the errors property for details."


class ProblemDetails(BaseModel):
    type: str
    title: str
    status: int
    detail: Optional[str] = None
    instance: Optional[str] = None
    errors: dict[str, List[str]] = Field(default_factory=dict)


def errors_by_field(errors: Iterable[dict[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic error entries by dotted field location, dropping the request section prefix."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in {"body", "path", "query", "header"}:
            location = location[1:]
        key = ".".join(location) or "body"
        grouped.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return grouped


def validation_problem(
    errors: dict[str, list[str]],
    *,
    status: int = UNPROCESSABLE_ENTITY,
    instance: str | None = None,
    detail: str | None = VALIDATION_PROBLEM_DETAIL,
) -> ProblemDetails:
    return ProblemDetails(
        type=VALIDATION_PROBLEM_TYPE,
        title=VALIDATION_PROBLEM_TITLE,
        status=status,
        detail=detail,
        instance=instance,
        errors=errors,
    )
