"""Errors raised by the customer store and service layer."""

from __future__ import annotations


class CustomerError(Exception):
    """Base class for customer related failures."""


class CustomerNotFoundError(CustomerError):
    def __init__(self, key: object, field: str = "id") -> None:
        super().__init__(f"Customer with {field} '{key}' not found")


class CustomerIdMismatchError(CustomerError):
    def __init__(self, path_id: int, body_id: int) -> None:
        super().__init__(f"Route id {path_id} does not match body id {body_id}")


class DuplicateCustomerError(CustomerError):
    def __init__(self, customer_id: int) -> None:
        super().__init__(f"Customer id {customer_id} already exists")


class DuplicateAddressError(CustomerError):
    def __init__(self, address_ids: list[int]) -> None:
        super().__init__(f"Address id(s) {address_ids} already exist in the store")


class PatchError(CustomerError):
    """A patch document could not be applied.

    ``errors`` maps a field (or ``"patch"`` for document level problems) to messages,
    in the same shape as a validation problem body.
    """

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {"patch": [message]}
