"""
Parcel Tracking API Endpoints.

Registers parcels, moves them along the delivery workflow and lets
callers change or remove parcels while they are still registered.
"""

from fastapi import APIRouter, Depends, Response, status, Path
from parcel_tracker.app.db.session import get_parcel_store
from parcel_tracker.app.domain.parcels.parcel_service import ParcelService
from parcel_tracker.app.repositories.parcel_store import ParcelStore
from parcel_tracker.app.schemas.parcel import (
    ParcelCreate,
    ParcelAddressUpdate,
    ParcelStatusUpdate,
    ParcelResponse,
    ParcelListResponse,
)

router = APIRouter(tags=["Parcels"])


def get_parcel_service(store: ParcelStore = Depends(get_parcel_store)) -> ParcelService:
    return ParcelService(store)


@router.post("/parcels", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def register_parcel(
    parcel_data: ParcelCreate,
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Register a new parcel for a client.

    The parcel starts in the `registered` status.
    """
    parcel = await service.register(parcel_data.client, parcel_data.address)
    return ParcelResponse.model_validate(parcel, from_attributes=True)


@router.get("/parcels/{number}", response_model=ParcelResponse)
async def get_parcel(
    number: int = Path(..., description="Parcel number"),
    store: ParcelStore = Depends(get_parcel_store)
):
    """Get a parcel by number, in any status."""
    parcel = await store.get(number)
    return ParcelResponse.model_validate(parcel, from_attributes=True)


@router.get("/clients/{client}/parcels", response_model=ParcelListResponse)
async def list_client_parcels(
    client: int = Path(..., description="Client ID"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    List all parcels of a client.

    Order is not guaranteed. Returns an empty list for unknown clients.
    """
    parcels = await service.client_parcels(client)
    return ParcelListResponse(
        parcels=[ParcelResponse.model_validate(p, from_attributes=True) for p in parcels],
        total=len(parcels)
    )


@router.patch("/parcels/{number}/address", response_model=ParcelResponse)
async def change_parcel_address(
    address_data: ParcelAddressUpdate,
    number: int = Path(..., description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Change the delivery address.

    Returns 409 if the parcel is no longer registered.
    """
    parcel = await service.change_address(number, address_data.address)
    return ParcelResponse.model_validate(parcel, from_attributes=True)


@router.patch("/parcels/{number}/status", response_model=ParcelResponse)
async def set_parcel_status(
    status_data: ParcelStatusUpdate,
    number: int = Path(..., description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """Set the parcel status to any value, regardless of the current one."""
    parcel = await service.set_status(number, status_data.status)
    return ParcelResponse.model_validate(parcel, from_attributes=True)


@router.post("/parcels/{number}/advance", response_model=ParcelResponse)
async def advance_parcel(
    number: int = Path(..., description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """Move the parcel to the next workflow status (registered → sent → delivered)."""
    parcel = await service.next_status(number)
    return ParcelResponse.model_validate(parcel, from_attributes=True)


@router.delete("/parcels/{number}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parcel(
    number: int = Path(..., description="Parcel number"),
    service: ParcelService = Depends(get_parcel_service)
):
    """
    Delete a parcel.

    Returns 409 if the parcel is no longer registered.
    """
    await service.delete(number)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
