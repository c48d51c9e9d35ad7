from concurrent.futures import ThreadPoolExecutor

import pytest

from customers_api.data.customers_repository import InMemoryCustomerRepository, allocate_addresses
from customers_api.errors import CustomerNotFoundError, DuplicateAddressError, DuplicateCustomerError
from customers_api.models.domain import Address, Customer


def _customer(cid: int, cpf: str, address_ids: tuple[int, ...] = ()) -> Customer:
    return Customer(
        id=cid,
        name=f"Customer {cid}",
        cpf=cpf,
        addresses=[Address(id=aid, street=f"Street {aid}", city="City") for aid in address_ids],
    )


def test_lookups_return_first_match_in_insertion_order() -> None:
    repo = InMemoryCustomerRepository([_customer(3, "111"), _customer(1, "111"), _customer(2, "222")])

    assert [c.id for c in repo.list_customers()] == [3, 1, 2]
    assert repo.find_customer_by_id(1).id == 1
    assert repo.find_customer_by_national_id("111").id == 3
    assert repo.find_customer_by_id(42) is None
    assert repo.find_customer_by_national_id("999") is None


def test_add_customer_rejects_duplicate_id() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111")])

    with pytest.raises(DuplicateCustomerError):
        repo.add_customer(_customer(1, "222"))


def test_add_customer_rejects_address_id_held_by_another_customer() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (3,))])

    with pytest.raises(DuplicateAddressError):
        repo.add_customer(_customer(2, "222", (3,)))

    assert repo.find_customer_by_id(2) is None


def test_seeding_rejects_address_id_repeated_within_one_customer() -> None:
    with pytest.raises(DuplicateAddressError):
        InMemoryCustomerRepository([_customer(1, "111", (4, 4))])


def test_remove_customer_discards_its_addresses() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (1, 2)), _customer(2, "222", (9,))])

    repo.remove_customer(repo.find_customer_by_id(2))

    assert repo.find_customer_by_id(2) is None
    assert repo.max_address_id_global() == 2


def test_update_customer_fields_overwrites_in_place() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111")])
    target = repo.find_customer_by_id(1)

    repo.update_customer_fields(target, "New", "999")

    assert repo.find_customer_by_id(1).name == "New"
    assert repo.find_customer_by_national_id("999") is target


def test_max_ids_default_to_zero_on_empty_store() -> None:
    repo = InMemoryCustomerRepository()

    assert repo.max_customer_id() == 0
    assert repo.max_address_id_global() == 0


def test_max_address_id_spans_every_customer() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (4, 2)), _customer(2, "222", (7,)), _customer(3, "333")])

    assert repo.max_address_id_global() == 7


def test_allocate_addresses_pre_increments_in_input_order() -> None:
    allocated = allocate_addresses(10, [("A", "X"), ("B", "Y"), ("C", "Z")])

    assert [(a.id, a.street) for a in allocated] == [(11, "A"), (12, "B"), (13, "C")]


def test_create_customer_assigns_ids_from_store_maximums() -> None:
    repo = InMemoryCustomerRepository([_customer(5, "111", (3,)), _customer(2, "222", (8,))])

    created = repo.create_customer("New", "333", [("Rua 1", "Itajai"), ("Rua 2", "Itajai")])

    assert created.id == 6
    assert [a.id for a in created.addresses] == [9, 10]
    assert repo.list_customers()[-1] is created


def test_replace_addresses_continues_global_sequence() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (1, 2)), _customer(2, "222", (3,))])
    target = repo.find_customer_by_id(1)

    rebuilt = repo.replace_addresses(target, [("Rua Nova", "Gaspar")])

    assert [a.id for a in rebuilt] == [4]
    assert [a.id for a in target.addresses] == [4]
    assert repo.max_address_id_global() == 4


def test_replace_addresses_never_reuses_the_discarded_ids() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (5, 6))])
    target = repo.find_customer_by_id(1)

    repo.replace_addresses(target, [("A", "X"), ("B", "Y")])

    assert [a.id for a in target.addresses] == [7, 8]


def test_concurrent_creates_get_distinct_ids() -> None:
    repo = InMemoryCustomerRepository()

    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(lambda i: repo.create_customer(f"C{i}", str(i), [("S", "C")]), range(50)))

    assert sorted(c.id for c in created) == list(range(1, 51))
    assert sorted(c.addresses[0].id for c in created) == list(range(1, 51))


def test_replace_customer_overwrites_fields_and_addresses_together() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (1, 2)), _customer(2, "222", (3,))])
    target = repo.find_customer_by_id(1)

    rebuilt = repo.replace_customer(target, "Ana Maria", "444", [("Rua Nova", "Gaspar")])

    assert (target.name, target.cpf) == ("Ana Maria", "444")
    assert [a.id for a in rebuilt] == [4]
    assert repo.find_customer_by_national_id("444") is target


def test_replace_customer_on_removed_customer_leaves_it_untouched() -> None:
    repo = InMemoryCustomerRepository([_customer(1, "111", (1,))])
    target = repo.find_customer_by_id(1)
    repo.remove_customer(target)

    with pytest.raises(CustomerNotFoundError):
        repo.replace_customer(target, "Ghost", "000", [("A", "X")])

    assert (target.name, target.cpf) == ("Customer 1", "111")
    assert [a.id for a in target.addresses] == [1]
