"""Domain models for bookable inventory (trips and transport routes)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class ItemKind:
    TRIP = "trip"
    TRANSPORT = "transport"

    ALL = (TRIP, TRANSPORT)


class ItemStatus:
    ACTIVE = "active"
    COMING_SOON = "coming_soon"

    ALL = (ACTIVE, COMING_SOON)


@dataclass(slots=True)
class InventoryItem:
    id: str
    kind: str
    name: str
    price_cents: int
    capacity: Optional[int]
    current_bookings: int
    status: str
    description: Optional[str] = None
    category: Optional[str] = None
    original_price_cents: Optional[int] = None
    event_date: Optional[datetime] = None
    departure_time: Optional[str] = None
    transport_type: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and self.current_bookings >= self.capacity


@dataclass(slots=True)
class ItemCreateInput:
    kind: str
    name: str
    price_cents: int
    capacity: Optional[int] = None
    status: str = ItemStatus.ACTIVE
    description: Optional[str] = None
    category: Optional[str] = None
    original_price_cents: Optional[int] = None
    event_date: Optional[datetime] = None
    departure_time: Optional[str] = None
    transport_type: Optional[str] = None


# Sentinel used to differentiate between "not provided" and explicit None.
UNSET = object()


@dataclass(slots=True)
class ItemUpdateInput:
    name: str | object = UNSET
    price_cents: int | object = UNSET
    capacity: Optional[int] | object = UNSET
    description: Optional[str] | object = UNSET
    category: Optional[str] | object = UNSET
    original_price_cents: Optional[int] | object = UNSET
    event_date: Optional[datetime] | object = UNSET
    departure_time: Optional[str] | object = UNSET
    transport_type: Optional[str] | object = UNSET

    def changes(self) -> dict[str, object]:
        return {
            name: getattr(self, name)
            for name in self.__slots__
            if getattr(self, name) is not UNSET
        }


@dataclass(slots=True)
class ItemBooker:
    """An active booking on an item together with who holds it."""

    booking_id: str
    account_id: str
    username: str
    name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    amount_cents: int
    booking_date: datetime
