"""Apply JSON patch documents to the patchable customer fields."""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import ValidationError

from ...errors import PatchError
from ...models.domain import Customer
from ...schemas.customers import CustomerForPatch, PatchOperation
from ...schemas.problems import errors_by_field

# path segment (lower case) -> attribute on the working copy
PATCHABLE_FIELDS: dict[str, str] = {
    "name": "name",
    "cpf": "cpf",
}


def _resolve(path: str | None, *, role: str = "path") -> str:
    if not path or not path.startswith("/"):
        raise PatchError(f"The {role} '{path}' is not a valid JSON pointer.")
    segment = path[1:]
    field = PATCHABLE_FIELDS.get(segment.lower())
    if field is None:
        raise PatchError(f"The target location specified by path segment '{segment}' was not found.")
    return field


def _string_value(operation: PatchOperation) -> str:
    if "value" not in operation.model_fields_set:
        raise PatchError(f"The '{operation.op}' operation at '{operation.path}' requires a value.")
    if not isinstance(operation.value, str):
        raise PatchError(f"The value '{operation.value}' is invalid for target location '{operation.path}'.")
    return operation.value


def apply_patch(customer: Customer, operations: Sequence[PatchOperation]) -> CustomerForPatch:
    """Apply ``operations`` in order to a copy of the customer's patchable fields.

    The customer is left untouched; the caller writes the returned values back.
    Raises ``PatchError`` when an operation fails or the result does not validate.
    """
    working: dict[str, Any] = {field: getattr(customer, field) for field in PATCHABLE_FIELDS.values()}

    for operation in operations:
        target = _resolve(operation.path)
        if operation.op in ("add", "replace"):
            working[target] = _string_value(operation)
        elif operation.op == "remove":
            working[target] = ""
        elif operation.op in ("copy", "move"):
            source = _resolve(operation.from_, role="from")
            working[target] = working[source]
            if operation.op == "move" and source != target:
                working[source] = ""
        elif operation.op == "test":
            if working[target] != _string_value(operation):
                raise PatchError(
                    f"The current value '{working[target]}' at path '{operation.path}' "
                    f"is not equal to the test value '{operation.value}'."
                )

    try:
        return CustomerForPatch.model_validate(working)
    except ValidationError as exc:
        raise PatchError("The patched customer is not valid.", errors_by_field(exc.errors())) from exc
