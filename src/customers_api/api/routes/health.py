"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...data.customers_repository import CustomerRepository
from ..dependencies import get_repository

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(repository: CustomerRepository = Depends(get_repository)) -> dict:
    """Report liveness and how many customers the store holds."""
    return {"status": "ok", "customers": repository.count()}
