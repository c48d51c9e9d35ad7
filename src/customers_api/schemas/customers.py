"""Pydantic request/response models for customer endpoints."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NAME_MAX_LENGTH = 100
CPF_MAX_LENGTH = 11
ADDRESS_FIELD_MAX_LENGTH = 100


class _InputModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class CustomerDto(BaseModel):
    id: int
    name: str
    cpf: str


class AddressDto(BaseModel):
    id: int
    street: str
    city: str


class CustomerWithAddressesDto(CustomerDto):
    addresses: List[AddressDto] = Field(default_factory=list)


class CustomerForManipulation(_InputModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Customer name.")
    cpf: str = Field(
        ..., min_length=1, max_length=CPF_MAX_LENGTH, description="National tax id, used as an alternate key."
    )


class CustomerForCreation(CustomerForManipulation):
    pass


class CustomerForUpdate(CustomerForManipulation):
    id: int = Field(..., description="Must match the id in the route.")


class CustomerForPatch(CustomerForManipulation):
    """Working copy a patch document is applied to before it is written back."""


class AddressForCreation(_InputModel):
    street: str = Field(..., min_length=1, max_length=ADDRESS_FIELD_MAX_LENGTH)
    city: str = Field(..., min_length=1, max_length=ADDRESS_FIELD_MAX_LENGTH)


class CustomerWithAddressesForCreation(CustomerForCreation):
    addresses: List[AddressForCreation] = Field(default_factory=list)


class CustomerWithAddressesForUpdate(CustomerForUpdate):
    addresses: List[AddressForCreation] = Field(
        default_factory=list,
        description="Replaces every existing address; each one gets a new id.",
    )


class PatchOperation(BaseModel):
    """One RFC 6902 operation restricted to the patchable customer fields."""

    model_config = ConfigDict(populate_by_name=True)

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str
    value: Any = None
    from_: Optional[str] = Field(default=None, alias="from")
