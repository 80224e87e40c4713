"""
Parcel database model.

A single table of tracked shipments. The storage engine assigns the
parcel number on insert.
"""

from sqlalchemy import Column, Integer, String
from parcel_tracker.app.db.session import Base


class Parcel(Base):
    """
    Parcel model for the tracker.

    `status` is stored as plain text: "registered" gates address changes
    and deletion, every other value is opaque to the storage layer.
    `created_at` is an RFC3339 string supplied by the caller.
    """
    __tablename__ = "parcel"
    # Never reuse numbers of deleted parcels
    __table_args__ = {"sqlite_autoincrement": True}

    number = Column(Integer, primary_key=True, autoincrement=True)

    # Ownership
    client = Column(Integer, nullable=False, index=True)

    # Lifecycle
    status = Column(String, nullable=False)
    address = Column(String, nullable=False)

    # Timestamps
    created_at = Column(String, nullable=False)

    def __repr__(self):
        return f"<Parcel(number={self.number}, client={self.client}, status='{self.status}')>"
