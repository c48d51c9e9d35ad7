"""Customer and customer-with-addresses endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ...errors import CustomerIdMismatchError, CustomerNotFoundError
from ...schemas.customers import (
    CustomerDto,
    CustomerForCreation,
    CustomerForUpdate,
    CustomerWithAddressesDto,
    CustomerWithAddressesForCreation,
    CustomerWithAddressesForUpdate,
    PatchOperation,
)
from ...schemas.problems import UNPROCESSABLE_ENTITY, ProblemDetails
from ...services.customers import CustomerService
from ..dependencies import get_customer_service

router = APIRouter(prefix="/customers", tags=["customers"])

_VALIDATION_RESPONSE = {
    UNPROCESSABLE_ENTITY: {"model": ProblemDetails, "description": "Validation problem"},
}


def _not_found(exc: CustomerNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _bad_request(exc: CustomerIdMismatchError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# /with-addresses routes come first so "with-addresses" is not parsed as an id.


@router.get("/with-addresses", response_model=List[CustomerWithAddressesDto], status_code=status.HTTP_200_OK)
def get_customers_with_addresses(
    service: CustomerService = Depends(get_customer_service),
) -> List[CustomerWithAddressesDto]:
    return service.list_customers_with_addresses()


@router.get(
    "/with-addresses/{customer_id}",
    name="get_customer_with_addresses_by_id",
    response_model=CustomerWithAddressesDto,
    status_code=status.HTTP_200_OK,
)
def get_customer_with_addresses_by_id(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerWithAddressesDto:
    try:
        return service.get_customer_with_addresses(customer_id)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post(
    "/with-addresses",
    response_model=CustomerWithAddressesDto,
    status_code=status.HTTP_201_CREATED,
    responses=_VALIDATION_RESPONSE,
)
def create_customer_with_addresses(
    payload: CustomerWithAddressesForCreation,
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerWithAddressesDto:
    created = service.create_customer_with_addresses(payload)
    response.headers["Location"] = str(
        request.url_for("get_customer_with_addresses_by_id", customer_id=created.id)
    )
    return created


@router.put(
    "/with-addresses/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_VALIDATION_RESPONSE,
)
def update_customer_with_addresses(
    customer_id: int,
    payload: CustomerWithAddressesForUpdate,
    service: CustomerService = Depends(get_customer_service),
) -> None:
    """Overwrite name and cpf and replace every address; replaced addresses get new ids."""
    try:
        service.update_customer_with_addresses(customer_id, payload)
    except CustomerIdMismatchError as exc:
        raise _bad_request(exc) from exc
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.get("", response_model=List[CustomerDto], status_code=status.HTTP_200_OK)
def get_customers(service: CustomerService = Depends(get_customer_service)) -> List[CustomerDto]:
    return service.list_customers()


@router.get("/cpf/{cpf}", response_model=CustomerDto, status_code=status.HTTP_200_OK)
def get_customer_by_cpf(cpf: str, service: CustomerService = Depends(get_customer_service)) -> CustomerDto:
    try:
        return service.get_customer_by_cpf(cpf)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.get("/{id}", name="get_customer_by_id", response_model=CustomerDto, status_code=status.HTTP_200_OK)
def get_customer_by_id(id: int, service: CustomerService = Depends(get_customer_service)) -> CustomerDto:
    try:
        return service.get_customer(id)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("", response_model=CustomerDto, status_code=status.HTTP_201_CREATED, responses=_VALIDATION_RESPONSE)
def create_customer(
    payload: CustomerForCreation,
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDto:
    created = service.create_customer(payload)
    response.headers["Location"] = str(request.url_for("get_customer_by_id", id=created.id))
    return created


@router.put(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_VALIDATION_RESPONSE,
)
def update_customer(
    id: int,
    payload: CustomerForUpdate,
    service: CustomerService = Depends(get_customer_service),
) -> None:
    try:
        service.update_customer(id, payload)
    except CustomerIdMismatchError as exc:
        raise _bad_request(exc) from exc
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.patch(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_VALIDATION_RESPONSE,
)
def partially_update_customer(
    id: int,
    operations: List[PatchOperation],
    service: CustomerService = Depends(get_customer_service),
) -> None:
    """Apply a JSON patch document to ``name`` and ``cpf``.

    Patch failures are raised as ``PatchError`` and rendered as a 422 problem by the app.
    """
    try:
        service.patch_customer(id, operations)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_customer(id: int, service: CustomerService = Depends(get_customer_service)) -> None:
    try:
        service.delete_customer(id)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc
