"""
Parcel repository.

All reads and writes of the parcel table go through ParcelStore. Every
operation runs exactly one statement in its own short session, and the
status gate for address changes and deletion is part of the statement's
WHERE clause rather than a separate read.
"""

import logging
from typing import List
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from parcel_tracker.app.core.exceptions import ParcelNotFoundError
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.schemas.parcel import ParcelRecord

logger = logging.getLogger("parcel_tracker.store")


class ParcelStore:
    """
    Repository over the `parcel` table.

    Holds nothing but the session factory. Engine errors are never caught
    or wrapped here; they reach the caller as raised by SQLAlchemy.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def add(self, parcel: ParcelRecord) -> int:
        """
        Insert a parcel and return the number assigned by the engine.

        `parcel.number` is ignored.
        """
        row = Parcel(
            client=parcel.client,
            status=parcel.status,
            address=parcel.address,
            created_at=parcel.created_at,
        )
        async with self.session_factory() as session:
            async with session.begin():
                session.add(row)
                await session.flush()
                number = row.number

        logger.debug("Inserted parcel %s for client %s", number, parcel.client)
        return number

    async def get(self, number: int) -> ParcelRecord:
        """
        Read a single parcel by number.

        Raises:
            ParcelNotFoundError: If no row has this number
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(Parcel).where(Parcel.number == number)
            )
            row = result.scalar_one_or_none()

        if row is None:
            raise ParcelNotFoundError(number)

        return ParcelRecord.model_validate(row)

    async def get_by_client(self, client: int) -> List[ParcelRecord]:
        # No ORDER BY: callers must not rely on row order
        async with self.session_factory() as session:
            result = await session.execute(
                select(Parcel).where(Parcel.client == client)
            )
            rows = result.scalars().all()

        return [ParcelRecord.model_validate(row) for row in rows]

    async def set_status(self, number: int, status: str) -> bool:
        """
        Set the status of a parcel, whatever its current status.

        An unknown number updates nothing and is not an error.

        Returns:
            True if a row was updated
        """
        stmt = (
            update(Parcel)
            .where(Parcel.number == number)
            .values(status=status)
        )
        return await self._execute_write(stmt, "set_status", number)

    async def set_address(self, number: int, address: str) -> bool:
        """
        Change the address of a parcel that is still registered.

        Parcels in any other status, and unknown numbers, are left
        untouched without raising.

        Returns:
            True if a row was updated
        """
        stmt = (
            update(Parcel)
            .where(
                Parcel.number == number,
                Parcel.status == ParcelStatus.REGISTERED.value,
            )
            .values(address=address)
        )
        return await self._execute_write(stmt, "set_address", number)

    async def delete(self, number: int) -> bool:
        """
        Delete a parcel that is still registered.

        Same no-op semantics as `set_address`.

        Returns:
            True if a row was deleted
        """
        stmt = delete(Parcel).where(
            Parcel.number == number,
            Parcel.status == ParcelStatus.REGISTERED.value,
        )
        return await self._execute_write(stmt, "delete", number)

    async def _execute_write(self, stmt, operation: str, number: int) -> bool:
        stmt = stmt.execution_options(synchronize_session=False)
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(stmt)
                affected = result.rowcount

        logger.debug("%s on parcel %s affected %s row(s)", operation, number, affected)
        return affected > 0
