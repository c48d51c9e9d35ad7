"""Initial customers for the in-memory store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..models.domain import Address, Customer

DEFAULT_SEED: tuple[dict[str, Any], ...] = (
    {
        "id": 1,
        "name": "Linus Torvalds",
        "cpf": "73473943096",
        "addresses": [
            {"id": 1, "street": "Verão do Cometa", "city": "Elvira"},
            {"id": 2, "street": "Borboletas Psicodélicas", "city": "Perobia"},
        ],
    },
    {
        "id": 2,
        "name": "Bill Gates",
        "cpf": "95395994076",
        "addresses": [
            {"id": 3, "street": "Canção Excêntrica", "city": "Salandra"},
        ],
    },
)


def _customer_from_record(record: dict[str, Any]) -> Customer:
    try:
        return Customer(
            id=int(record["id"]),
            name=str(record["name"]),
            cpf=str(record["cpf"]),
            addresses=[
                Address(id=int(item["id"]), street=str(item["street"]), city=str(item["city"]))
                for item in record.get("addresses") or []
            ],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid customer seed record: {record!r}") from exc


def load_seed_customers(source: Optional[Path] = None) -> list[Customer]:
    """Load seed customers from a JSON array file, or the built-in seed when no file is given."""

    if source is None:
        return [_customer_from_record(record) for record in DEFAULT_SEED]

    if not source.exists():
        raise FileNotFoundError(f"Customer seed file not found: {source}")

    with source.open(mode="r", encoding="utf-8") as handle:
        records = json.load(handle)
    if not isinstance(records, list):
        raise ValueError(f"Customer seed file '{source}' must contain a JSON array.")
    return [_customer_from_record(record) for record in records]
