"""Run the API with uvicorn: ``python -m customers_api`` or ``customers-api``."""

from __future__ import annotations

import logging

import uvicorn

from .config import settings


def main() -> None:
    logging.basicConfig(level=settings.log_level)
    logging.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    uvicorn.run(
        "customers_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
