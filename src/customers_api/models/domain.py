"""Domain models for customer and address records."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class Address:
    """A street address owned by exactly one customer.

    Address ids are numbered across every customer in the store, not per customer.
    """

    id: int
    street: str
    city: str


@dataclass(slots=True)
class Customer:
    """Represents a customer identified by a store-assigned id and a national tax id (cpf)."""

    id: int
    name: str
    cpf: str
    addresses: list[Address] = field(default_factory=list)
