import json
import logging
from pathlib import Path
from typing import Any

import pytest

from customers_api import __main__ as main_module
from customers_api.api import dependencies
from customers_api.config import Settings
from customers_api.data.customers_repository import InMemoryCustomerRepository
from customers_api.data.seed import load_seed_customers
from customers_api.errors import DuplicateAddressError
from customers_api.persistence.customers import SupabaseCustomerRepository


def test_settings_defaults() -> None:
    config = Settings(_env_file=None)

    assert config.api_prefix == "/api"
    assert config.storage_backend == "memory"
    assert config.seed_file is None


def test_settings_parse_origins_and_log_level() -> None:
    config = Settings(_env_file=None, frontend_allowed_origins="http://a.test, http://b.test", log_level="debug")

    assert config.frontend_allowed_origins == ("http://a.test", "http://b.test")
    assert config.log_level == "DEBUG"


def test_default_seed_has_globally_unique_address_ids() -> None:
    customers = load_seed_customers()

    address_ids = [a.id for c in customers for a in c.addresses]
    assert len({c.id for c in customers}) == len(customers)
    assert len(set(address_ids)) == len(address_ids)


def test_seed_file_is_loaded(tmp_path: Path) -> None:
    seed = tmp_path / "customers.json"
    seed.write_text(
        json.dumps([{"id": 10, "name": "Ana", "cpf": "111", "addresses": [{"id": 3, "street": "S", "city": "C"}]}]),
        encoding="utf-8",
    )

    customers = load_seed_customers(seed)

    assert [(c.id, c.name) for c in customers] == [(10, "Ana")]
    assert customers[0].addresses[0].id == 3


def test_seed_file_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_seed_customers(tmp_path / "missing.json")

    not_a_list = tmp_path / "object.json"
    not_a_list.write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_customers(not_a_list)

    bad_record = tmp_path / "bad.json"
    bad_record.write_text('[{"id": 1}]', encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_customers(bad_record)


def test_build_repository_memory_uses_seed(tmp_path: Path) -> None:
    seed = tmp_path / "customers.json"
    seed.write_text(json.dumps([{"id": 4, "name": "Ana", "cpf": "111"}]), encoding="utf-8")

    repo = dependencies.build_repository(Settings(_env_file=None, seed_file=seed))

    assert isinstance(repo, InMemoryCustomerRepository)
    assert repo.max_customer_id() == 4


def test_build_repository_rejects_seed_with_shared_address_id(tmp_path: Path) -> None:
    seed = tmp_path / "customers.json"
    seed.write_text(
        json.dumps(
            [
                {"id": 1, "name": "Ana", "cpf": "111", "addresses": [{"id": 3, "street": "S", "city": "C"}]},
                {"id": 2, "name": "Bob", "cpf": "222", "addresses": [{"id": 3, "street": "T", "city": "D"}]},
            ]
        ),
        encoding="utf-8",
    )

    with pytest.raises(DuplicateAddressError):
        dependencies.build_repository(Settings(_env_file=None, seed_file=seed))


def test_build_repository_supabase(monkeypatch: pytest.MonkeyPatch) -> None:
    from customers_api.db import supabase as supabase_module

    config = Settings(_env_file=None, storage_backend="supabase")

    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda *args: None)
    with pytest.raises(RuntimeError):
        dependencies.build_repository(config)

    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda *args: object())
    assert isinstance(dependencies.build_repository(config), SupabaseCustomerRepository)


def test_build_repository_supabase_uses_credentials_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from customers_api.db import supabase as supabase_module

    created: list[tuple[str, str]] = []

    def fake_create_client(url: str, key: str) -> object:
        created.append((url, key))
        return object()

    monkeypatch.setattr(supabase_module, "create_client", fake_create_client)
    supabase_module.get_supabase_client.cache_clear()
    try:
        config = Settings(
            _env_file=None,
            storage_backend="supabase",
            supabase_url="https://example.supabase.co",
            supabase_key="service-role-key",
        )
        repo = dependencies.build_repository(config)
    finally:
        supabase_module.get_supabase_client.cache_clear()

    assert isinstance(repo, SupabaseCustomerRepository)
    assert created == [("https://example.supabase.co", "service-role-key")]


def test_main_configures_logging_before_starting_uvicorn(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    calls: list[tuple[str, Any]] = []

    monkeypatch.setattr(main_module.logging, "basicConfig", lambda **kwargs: calls.append(("logging", kwargs)))
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kwargs: calls.append(("uvicorn", kwargs)))
    caplog.set_level(logging.INFO)

    main_module.main()

    assert [name for name, _ in calls] == ["logging", "uvicorn"]
    assert calls[0][1]["level"] == main_module.settings.log_level
    run_kwargs = calls[1][1]
    assert run_kwargs["host"] == main_module.settings.host
    assert run_kwargs["port"] == main_module.settings.port
    assert run_kwargs["log_level"] == main_module.settings.log_level.lower()
    assert f"Starting {main_module.settings.app_name}" in caplog.text
