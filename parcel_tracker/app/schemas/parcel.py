"""
Parcel Pydantic schemas.

Defines the exchange record used by the store and the request and
response models for the HTTP API.
"""

import enum
from pydantic import BaseModel, Field, field_validator
from typing import List


class ParcelRecord(BaseModel):
    """
    A parcel as exchanged with the store.

    `number` is ignored on insert and filled in from the engine's
    generated key on every read.
    """
    number: int = 0
    client: int
    status: str
    address: str
    created_at: str

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, value):
        if isinstance(value, enum.Enum):
            return value.value
        return value

    class Config:
        from_attributes = True


class ParcelCreate(BaseModel):
    """Schema for registering a new parcel."""
    client: int = Field(..., description="Owning client identifier")
    address: str = Field(..., min_length=1, description="Delivery address")


class ParcelAddressUpdate(BaseModel):
    """Schema for changing the delivery address of a registered parcel."""
    address: str = Field(..., min_length=1, description="New delivery address")


class ParcelStatusUpdate(BaseModel):
    """Schema for setting the parcel status."""
    status: str = Field(..., min_length=1, description="New status value")


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    number: int
    client: int
    status: str
    address: str
    created_at: str

    class Config:
        from_attributes = True


class ParcelListResponse(BaseModel):
    """Schema for a client's parcel list."""
    parcels: List[ParcelResponse]
    total: int
