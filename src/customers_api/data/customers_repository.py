"""Customer store abstraction and the in-memory implementation."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from ..errors import CustomerNotFoundError, DuplicateAddressError, DuplicateCustomerError
from ..models.domain import Address, Customer

logger = logging.getLogger(__name__)

# (street, city) pairs for addresses that have not been assigned an id yet
NewAddress = tuple[str, str]


class CustomerRepository(ABC):
    """Operations the handlers need from a customer store.

    Lookups are linear scans returning the first match. Ids are assigned as the
    current maximum plus one; an empty store starts at 1. Address ids are taken
    from the maximum across every customer's addresses.
    """

    @abstractmethod
    def list_customers(self) -> list[Customer]:
        ...

    @abstractmethod
    def find_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        ...

    @abstractmethod
    def find_customer_by_national_id(self, cpf: str) -> Optional[Customer]:
        ...

    @abstractmethod
    def add_customer(self, customer: Customer) -> None:
        """Store a customer whose id has already been assigned by the caller."""

    @abstractmethod
    def remove_customer(self, customer: Customer) -> None:
        ...

    @abstractmethod
    def update_customer_fields(self, target: Customer, new_name: str, new_cpf: str) -> None:
        ...

    @abstractmethod
    def max_customer_id(self) -> int:
        ...

    @abstractmethod
    def max_address_id_global(self) -> int:
        ...

    @abstractmethod
    def create_customer(self, name: str, cpf: str, addresses: Sequence[NewAddress] = ()) -> Customer:
        """Assign a customer id and fresh address ids, then store the customer atomically."""

    @abstractmethod
    def replace_addresses(self, target: Customer, addresses: Sequence[NewAddress]) -> list[Address]:
        """Discard the target's addresses and rebuild them with new global ids."""

    @abstractmethod
    def replace_customer(
        self, target: Customer, new_name: str, new_cpf: str, addresses: Sequence[NewAddress]
    ) -> list[Address]:
        """Overwrite name and cpf and rebuild the address list as one step.

        Raises ``CustomerNotFoundError`` when the target is no longer stored.
        """

    def count(self) -> int:
        return len(self.list_customers())


def allocate_addresses(max_address_id: int, addresses: Iterable[NewAddress]) -> list[Address]:
    """Number new addresses in input order, starting right after ``max_address_id``."""
    allocated: list[Address] = []
    next_id = max_address_id
    for street, city in addresses:
        next_id += 1
        allocated.append(Address(id=next_id, street=street, city=city))
    return allocated


def clashing_address_ids(existing_ids: Iterable[int], incoming: Iterable[Address]) -> list[int]:
    """Ids in ``incoming`` that are already taken, including repeats within ``incoming``."""
    taken = set(existing_ids)
    clashes: list[int] = []
    for address in incoming:
        if address.id in taken:
            clashes.append(address.id)
        taken.add(address.id)
    return clashes


class InMemoryCustomerRepository(CustomerRepository):
    """Process-wide list of customers guarded by a single mutation lock."""

    def __init__(self, customers: Iterable[Customer] | None = None) -> None:
        self._lock = threading.RLock()
        self._customers: list[Customer] = []
        for customer in customers or ():
            self.add_customer(customer)

    def list_customers(self) -> list[Customer]:
        with self._lock:
            return list(self._customers)

    def find_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        with self._lock:
            return next((c for c in self._customers if c.id == customer_id), None)

    def find_customer_by_national_id(self, cpf: str) -> Optional[Customer]:
        with self._lock:
            return next((c for c in self._customers if c.cpf == cpf), None)

    def add_customer(self, customer: Customer) -> None:
        with self._lock:
            if any(existing.id == customer.id for existing in self._customers):
                raise DuplicateCustomerError(customer.id)
            clashes = clashing_address_ids(
                (address.id for existing in self._customers for address in existing.addresses),
                customer.addresses,
            )
            if clashes:
                raise DuplicateAddressError(clashes)
            self._customers.append(customer)

    def remove_customer(self, customer: Customer) -> None:
        with self._lock:
            for index, existing in enumerate(self._customers):
                if existing is customer:
                    del self._customers[index]
                    return
        logger.warning(f"Customer {customer.id} was not in the store, nothing removed")

    def update_customer_fields(self, target: Customer, new_name: str, new_cpf: str) -> None:
        with self._lock:
            target.name = new_name
            target.cpf = new_cpf

    def max_customer_id(self) -> int:
        with self._lock:
            return max((c.id for c in self._customers), default=0)

    def max_address_id_global(self) -> int:
        with self._lock:
            return max(
                (address.id for customer in self._customers for address in customer.addresses),
                default=0,
            )

    def create_customer(self, name: str, cpf: str, addresses: Sequence[NewAddress] = ()) -> Customer:
        with self._lock:
            customer = Customer(
                id=self.max_customer_id() + 1,
                name=name,
                cpf=cpf,
                addresses=allocate_addresses(self.max_address_id_global(), addresses),
            )
            self._customers.append(customer)
            return customer

    def replace_addresses(self, target: Customer, addresses: Sequence[NewAddress]) -> list[Address]:
        with self._lock:
            # Max is taken before the old list is dropped, so discarded ids are never reused.
            previous_max = self.max_address_id_global()
            target.addresses = allocate_addresses(previous_max, addresses)
            return list(target.addresses)

    def replace_customer(
        self, target: Customer, new_name: str, new_cpf: str, addresses: Sequence[NewAddress]
    ) -> list[Address]:
        with self._lock:
            if not any(existing is target for existing in self._customers):
                raise CustomerNotFoundError(target.id)
            rebuilt = self.replace_addresses(target, addresses)
            target.name = new_name
            target.cpf = new_cpf
            return rebuilt
