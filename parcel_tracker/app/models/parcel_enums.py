"""
Parcel Status Enumeration.
"""

import enum


class ParcelStatus(str, enum.Enum):
    """
    Parcel status enumeration.

    Status flow:
        REGISTERED → SENT → DELIVERED

    Only REGISTERED parcels may change address or be deleted.
    The status column itself is free text; these are the values the
    workflow produces.
    """
    REGISTERED = "registered"
    SENT = "sent"
    DELIVERED = "delivered"


# Workflow successor for each status; DELIVERED is terminal.
NEXT_STATUS = {
    ParcelStatus.REGISTERED.value: ParcelStatus.SENT.value,
    ParcelStatus.SENT.value: ParcelStatus.DELIVERED.value,
}
