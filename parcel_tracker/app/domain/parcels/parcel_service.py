"""
Parcel Service (Domain Logic).

Registration and the registered → sent → delivered workflow, built only
on ParcelStore operations.
"""

import logging
from datetime import datetime, timezone
from typing import List

from parcel_tracker.app.core.exceptions import ParcelConcurrentUpdateError, ParcelNotRegisteredError
from parcel_tracker.app.models.parcel_enums import ParcelStatus, NEXT_STATUS
from parcel_tracker.app.repositories.parcel_store import ParcelStore
from parcel_tracker.app.schemas.parcel import ParcelRecord

logger = logging.getLogger("parcel_tracker.service")

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Gated writes are retried while the follow-up read finds the parcel registered
GATED_WRITE_ATTEMPTS = 2


def utc_timestamp() -> str:
    """Current UTC time as an RFC3339 string."""
    return datetime.now(timezone.utc).strftime(RFC3339_FORMAT)


class ParcelService:

    def __init__(self, store: ParcelStore):
        self.store = store

    async def register(self, client: int, address: str) -> ParcelRecord:
        """
        Register a new parcel for a client.

        The parcel starts in the registered status and is stamped with the
        current UTC time.
        """
        parcel = ParcelRecord(
            client=client,
            status=ParcelStatus.REGISTERED.value,
            address=address,
            created_at=utc_timestamp(),
        )
        parcel.number = await self.store.add(parcel)

        logger.info(
            "Registered parcel %s to address %s for client %s at %s",
            parcel.number, parcel.address, parcel.client, parcel.created_at,
        )
        return parcel

    async def client_parcels(self, client: int) -> List[ParcelRecord]:
        return await self.store.get_by_client(client)

    async def next_status(self, number: int) -> ParcelRecord:
        """
        Advance a parcel one step along registered → sent → delivered.

        Delivered parcels, and parcels in a status outside the workflow,
        are returned unchanged.

        Raises:
            ParcelNotFoundError: If the parcel does not exist
        """
        parcel = await self.store.get(number)

        next_status = NEXT_STATUS.get(parcel.status)
        if next_status is None:
            return parcel

        await self.store.set_status(number, next_status)
        logger.info("Parcel %s status changed %s -> %s", number, parcel.status, next_status)

        return await self.store.get(number)

    async def set_status(self, number: int, status: str) -> ParcelRecord:
        await self.store.set_status(number, status)
        return await self.store.get(number)

    async def change_address(self, number: int, address: str) -> ParcelRecord:
        """
        Change the delivery address of a registered parcel.

        Raises:
            ParcelNotFoundError: If the parcel does not exist
            ParcelNotRegisteredError: If the parcel is no longer registered
            ParcelConcurrentUpdateError: If the status kept changing under the write
        """
        await self._gated_write(number, self.store.set_address, address)

        logger.info("Parcel %s address changed to %s", number, address)
        return await self.store.get(number)

    async def delete(self, number: int) -> None:
        """
        Delete a registered parcel.

        Raises:
            ParcelNotFoundError: If the parcel does not exist
            ParcelNotRegisteredError: If the parcel is no longer registered
            ParcelConcurrentUpdateError: If the status kept changing under the write
        """
        await self._gated_write(number, self.store.delete)

        logger.info("Parcel %s deleted", number)

    async def _gated_write(self, number: int, write, *args) -> None:
        for _ in range(GATED_WRITE_ATTEMPTS):
            if await write(number, *args):
                return

            # The write already ran; this read only tells "missing" from "gated"
            current = await self.store.get(number)
            if current.status != ParcelStatus.REGISTERED.value:
                raise ParcelNotRegisteredError(number, current.status)

        raise ParcelConcurrentUpdateError(number)
