"""Customer database persistence."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Sequence

from supabase import Client

from ..data.customers_repository import (
    CustomerRepository,
    NewAddress,
    allocate_addresses,
    clashing_address_ids,
)
from ..errors import CustomerNotFoundError, DuplicateAddressError, DuplicateCustomerError
from ..models.domain import Address, Customer

logger = logging.getLogger(__name__)

CUSTOMERS_TABLE = "customers"
ADDRESSES_TABLE = "addresses"


def _address_from_row(row: dict[str, Any]) -> Address:
    return Address(id=int(row["id"]), street=row["street"], city=row["city"])


def _address_to_row(customer_id: int, address: Address) -> dict[str, Any]:
    return {
        "id": address.id,
        "customer_id": customer_id,
        "street": address.street,
        "city": address.city,
    }


class SupabaseCustomerRepository(CustomerRepository):
    """Customer store backed by the ``customers`` and ``addresses`` Supabase tables.

    Records returned here are snapshots: mutations go through the repository
    methods, which write the table first and then mirror the change onto the
    record they were given. Id assignment is serialised by a process-local lock,
    so only one API process should write to a given project.
    """

    def __init__(self, client: Client) -> None:
        self._client = client
        self._lock = threading.Lock()

    def _addresses_for(self, customer_ids: Sequence[int]) -> dict[int, list[Address]]:
        grouped: dict[int, list[Address]] = {customer_id: [] for customer_id in customer_ids}
        if not customer_ids:
            return grouped
        response = (
            self._client.table(ADDRESSES_TABLE)
            .select("*")
            .in_("customer_id", list(customer_ids))
            .order("id")
            .execute()
        )
        for row in response.data or []:
            grouped.setdefault(int(row["customer_id"]), []).append(_address_from_row(row))
        return grouped

    def _hydrate(self, rows: list[dict[str, Any]]) -> list[Customer]:
        ids = [int(row["id"]) for row in rows]
        addresses = self._addresses_for(ids)
        return [
            Customer(
                id=int(row["id"]),
                name=row["name"],
                cpf=row["cpf"],
                addresses=addresses.get(int(row["id"]), []),
            )
            for row in rows
        ]

    def _first(self, column: str, value: Any) -> Optional[Customer]:
        response = (
            self._client.table(CUSTOMERS_TABLE)
            .select("*")
            .eq(column, value)
            .order("id")
            .limit(1)
            .execute()
        )
        customers = self._hydrate(response.data or [])
        return customers[0] if customers else None

    def _max_id(self, table: str) -> int:
        response = self._client.table(table).select("id").order("id", desc=True).limit(1).execute()
        rows = response.data or []
        return int(rows[0]["id"]) if rows else 0

    def _insert(self, customer: Customer) -> None:
        self._client.table(CUSTOMERS_TABLE).insert(
            {"id": customer.id, "name": customer.name, "cpf": customer.cpf}
        ).execute()
        if not customer.addresses:
            return
        try:
            self._client.table(ADDRESSES_TABLE).insert(
                [_address_to_row(customer.id, address) for address in customer.addresses]
            ).execute()
        except Exception:
            logger.error(f"Address insert failed for customer {customer.id}, removing the customer row")
            self._client.table(CUSTOMERS_TABLE).delete().eq("id", customer.id).execute()
            raise

    def _swap_addresses(
        self,
        target: Customer,
        addresses: Sequence[NewAddress],
        fields: dict[str, str] | None = None,
    ) -> list[Address]:
        """Insert the new address rows, then update the customer row and drop the old rows.

        New ids are fresh, so the insert cannot collide with the rows it replaces. When a
        later step fails the new rows are deleted and the previous name and cpf written back.
        """
        old_ids = [address.id for address in self._addresses_for([target.id]).get(target.id, [])]
        new_addresses = allocate_addresses(self.max_address_id_global(), addresses)
        new_ids = [address.id for address in new_addresses]
        if new_addresses:
            self._client.table(ADDRESSES_TABLE).insert(
                [_address_to_row(target.id, address) for address in new_addresses]
            ).execute()
        try:
            if fields is not None:
                self._client.table(CUSTOMERS_TABLE).update(fields).eq("id", target.id).execute()
            if old_ids:
                self._client.table(ADDRESSES_TABLE).delete().in_("id", old_ids).execute()
        except Exception:
            logger.error(f"Rebuilding addresses for customer {target.id} failed, rolling back")
            if new_ids:
                self._client.table(ADDRESSES_TABLE).delete().in_("id", new_ids).execute()
            if fields is not None:
                self._client.table(CUSTOMERS_TABLE).update({"name": target.name, "cpf": target.cpf}).eq(
                    "id", target.id
                ).execute()
            raise

        target.addresses = new_addresses
        if fields is not None:
            target.name = fields["name"]
            target.cpf = fields["cpf"]
        logger.info(f"Rebuilt {len(new_addresses)} addresses for customer {target.id} in Supabase")
        return list(new_addresses)

    def list_customers(self) -> list[Customer]:
        response = self._client.table(CUSTOMERS_TABLE).select("*").order("id").execute()
        return self._hydrate(response.data or [])

    def find_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self._first("id", customer_id)

    def find_customer_by_national_id(self, cpf: str) -> Optional[Customer]:
        return self._first("cpf", cpf)

    def add_customer(self, customer: Customer) -> None:
        with self._lock:
            if self.find_customer_by_id(customer.id) is not None:
                raise DuplicateCustomerError(customer.id)
            existing: list[int] = []
            if customer.addresses:
                response = (
                    self._client.table(ADDRESSES_TABLE)
                    .select("id")
                    .in_("id", [address.id for address in customer.addresses])
                    .execute()
                )
                existing = [int(row["id"]) for row in response.data or []]
            clashes = clashing_address_ids(existing, customer.addresses)
            if clashes:
                raise DuplicateAddressError(clashes)
            self._insert(customer)

    def remove_customer(self, customer: Customer) -> None:
        with self._lock:
            self._client.table(ADDRESSES_TABLE).delete().eq("customer_id", customer.id).execute()
            self._client.table(CUSTOMERS_TABLE).delete().eq("id", customer.id).execute()

    def update_customer_fields(self, target: Customer, new_name: str, new_cpf: str) -> None:
        with self._lock:
            self._client.table(CUSTOMERS_TABLE).update({"name": new_name, "cpf": new_cpf}).eq(
                "id", target.id
            ).execute()
            target.name = new_name
            target.cpf = new_cpf

    def max_customer_id(self) -> int:
        return self._max_id(CUSTOMERS_TABLE)

    def max_address_id_global(self) -> int:
        return self._max_id(ADDRESSES_TABLE)

    def create_customer(self, name: str, cpf: str, addresses: Sequence[NewAddress] = ()) -> Customer:
        with self._lock:
            customer = Customer(
                id=self.max_customer_id() + 1,
                name=name,
                cpf=cpf,
                addresses=allocate_addresses(self.max_address_id_global(), addresses),
            )
            self._insert(customer)
            return customer

    def replace_addresses(self, target: Customer, addresses: Sequence[NewAddress]) -> list[Address]:
        with self._lock:
            return self._swap_addresses(target, addresses)

    def replace_customer(
        self, target: Customer, new_name: str, new_cpf: str, addresses: Sequence[NewAddress]
    ) -> list[Address]:
        with self._lock:
            if self.find_customer_by_id(target.id) is None:
                raise CustomerNotFoundError(target.id)
            return self._swap_addresses(target, addresses, {"name": new_name, "cpf": new_cpf})
