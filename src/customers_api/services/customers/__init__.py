"""Customer service helpers."""

from .mapping import to_address_dto, to_customer_dto, to_customer_with_addresses_dto
from .patching import PATCHABLE_FIELDS, apply_patch
from .service import CustomerService

__all__ = [
    "CustomerService",
    "apply_patch",
    "PATCHABLE_FIELDS",
    "to_address_dto",
    "to_customer_dto",
    "to_customer_with_addresses_dto",
]
