"""Store construction and request-scoped dependencies."""

from __future__ import annotations

import logging

from fastapi import Request

from ..config import Settings, settings as default_settings
from ..data.customers_repository import CustomerRepository, InMemoryCustomerRepository
from ..data.seed import load_seed_customers
from ..services.customers import CustomerService


def build_repository(config: Settings | None = None) -> CustomerRepository:
    """Create the customer store selected by ``storage_backend``."""
    config = config or default_settings
    if config.storage_backend == "supabase":
        from ..db.supabase import get_supabase_client
        from ..persistence.customers import SupabaseCustomerRepository

        client = get_supabase_client(config.supabase_url, config.supabase_key)
        if client is None:
            raise RuntimeError(
                "storage_backend is 'supabase' but Supabase is not configured. "
                "Set CUSTOMERS_SUPABASE_URL and CUSTOMERS_SUPABASE_KEY."
            )
        logging.info("Using Supabase customer store")
        return SupabaseCustomerRepository(client)

    customers = load_seed_customers(config.seed_file)
    logging.info(f"Using in-memory customer store seeded with {len(customers)} customers")
    return InMemoryCustomerRepository(customers)


def get_repository(request: Request) -> CustomerRepository:
    return request.app.state.repository


def get_customer_service(request: Request) -> CustomerService:
    return CustomerService(get_repository(request))
