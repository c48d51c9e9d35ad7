"""Customer operations behind the HTTP routes."""

from __future__ import annotations

import logging
from typing import Sequence

from ...data.customers_repository import CustomerRepository, NewAddress
from ...errors import CustomerIdMismatchError, CustomerNotFoundError
from ...models.domain import Customer
from ...schemas.customers import (
    AddressForCreation,
    CustomerDto,
    CustomerForCreation,
    CustomerForUpdate,
    CustomerWithAddressesDto,
    CustomerWithAddressesForCreation,
    CustomerWithAddressesForUpdate,
    PatchOperation,
)
from .mapping import to_customer_dto, to_customer_with_addresses_dto
from .patching import apply_patch

logger = logging.getLogger(__name__)


def _new_addresses(addresses: Sequence[AddressForCreation]) -> list[NewAddress]:
    return [(address.street, address.city) for address in addresses]


class CustomerService:
    """Read and mutate customers through a ``CustomerRepository``.

    Every failure is raised as a ``CustomerError`` subclass; the routes decide
    which HTTP status it becomes.
    """

    def __init__(self, repository: CustomerRepository) -> None:
        self.repository = repository

    def _require(self, customer_id: int) -> Customer:
        customer = self.repository.find_customer_by_id(customer_id)
        if customer is None:
            logger.warning(f"Customer {customer_id} not found")
            raise CustomerNotFoundError(customer_id)
        return customer

    # Plain customers

    def list_customers(self) -> list[CustomerDto]:
        return [to_customer_dto(customer) for customer in self.repository.list_customers()]

    def get_customer(self, customer_id: int) -> CustomerDto:
        return to_customer_dto(self._require(customer_id))

    def get_customer_by_cpf(self, cpf: str) -> CustomerDto:
        customer = self.repository.find_customer_by_national_id(cpf)
        if customer is None:
            logger.warning(f"Customer with cpf {cpf} not found")
            raise CustomerNotFoundError(cpf, field="cpf")
        return to_customer_dto(customer)

    def create_customer(self, payload: CustomerForCreation) -> CustomerDto:
        customer = self.repository.create_customer(payload.name, payload.cpf)
        logger.info(f"Created customer {customer.id}")
        return to_customer_dto(customer)

    def update_customer(self, customer_id: int, payload: CustomerForUpdate) -> None:
        if customer_id != payload.id:
            raise CustomerIdMismatchError(customer_id, payload.id)
        customer = self._require(customer_id)
        self.repository.update_customer_fields(customer, payload.name, payload.cpf)
        logger.info(f"Updated customer {customer_id}")

    def patch_customer(self, customer_id: int, operations: Sequence[PatchOperation]) -> None:
        customer = self._require(customer_id)
        patched = apply_patch(customer, operations)
        self.repository.update_customer_fields(customer, patched.name, patched.cpf)
        logger.info(f"Patched customer {customer_id} with {len(operations)} operation(s)")

    def delete_customer(self, customer_id: int) -> None:
        customer = self._require(customer_id)
        self.repository.remove_customer(customer)
        logger.info(f"Deleted customer {customer_id} and {len(customer.addresses)} address(es)")

    # Customers with addresses

    def list_customers_with_addresses(self) -> list[CustomerWithAddressesDto]:
        return [to_customer_with_addresses_dto(customer) for customer in self.repository.list_customers()]

    def get_customer_with_addresses(self, customer_id: int) -> CustomerWithAddressesDto:
        return to_customer_with_addresses_dto(self._require(customer_id))

    def create_customer_with_addresses(self, payload: CustomerWithAddressesForCreation) -> CustomerWithAddressesDto:
        customer = self.repository.create_customer(payload.name, payload.cpf, _new_addresses(payload.addresses))
        logger.info(f"Created customer {customer.id} with {len(customer.addresses)} address(es)")
        return to_customer_with_addresses_dto(customer)

    def update_customer_with_addresses(self, customer_id: int, payload: CustomerWithAddressesForUpdate) -> None:
        if customer_id != payload.id:
            raise CustomerIdMismatchError(customer_id, payload.id)
        customer = self._require(customer_id)
        addresses = self.repository.replace_customer(
            customer, payload.name, payload.cpf, _new_addresses(payload.addresses)
        )
        logger.info(f"Updated customer {customer_id}, rebuilt {len(addresses)} address(es)")
