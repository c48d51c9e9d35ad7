"""Conversions between stored records and response models."""

from __future__ import annotations

from ...models.domain import Address, Customer
from ...schemas.customers import AddressDto, CustomerDto, CustomerWithAddressesDto


def to_address_dto(address: Address) -> AddressDto:
    return AddressDto(id=address.id, street=address.street, city=address.city)


def to_customer_dto(customer: Customer) -> CustomerDto:
    return CustomerDto(id=customer.id, name=customer.name, cpf=customer.cpf)


def to_customer_with_addresses_dto(customer: Customer) -> CustomerWithAddressesDto:
    return CustomerWithAddressesDto(
        id=customer.id,
        name=customer.name,
        cpf=customer.cpf,
        addresses=[to_address_dto(address) for address in customer.addresses],
    )
