"""
Line items -- the five bookable service variants inside a proposal.

Responsibility
--------------
Frozen value objects for hotel stays, transportation, flights, car rental
and additional services, plus the exhaustive ``update_line`` function that
applies an edit to any variant.  Each variant derives its own ``total_price``
(and, for hotels, ``nights``) on construction, so every edit -- which always
builds a new value -- recomputes them.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  Imported by
validation, pricing, proposal and confirmation.

Invariants enforced
-------------------
* ``total_price`` is always ``rate x quantities`` of the current field
  values (see the per-kind ``line_total`` methods).
* CASCADING_CLEAR -- changing a hotel line's destination clears hotel,
  room type, board type and currency; changing the hotel clears room type,
  board type and currency.
* Line ids are unique within their collection only.

Failure modes
-------------
* ``UnknownLineFieldError`` when an update names a field the variant does
  not have, or a derived field (``id``, ``nights``, ``total_price``).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from typing import Any, ClassVar, Iterable, Union

from tour_kernel.domain.amounts import (
    ZERO,
    nights_between,
    parse_amount_or_zero,
    parse_quantity_or_zero,
)
from tour_kernel.domain.service_kinds import ServiceKind
from tour_kernel.exceptions import UnknownLineFieldError

_DERIVED_FIELDS = frozenset({"id", "nights", "total_price"})


class _LineBehaviour:
    """Shared behaviour for the line variants. Subclasses are frozen dataclasses."""

    kind: ClassVar[ServiceKind]
    # Fields a user types or picks; default quantities and the currency tag
    # are not user input for emptiness checks.
    USER_FIELDS: ClassVar[tuple[str, ...]]
    # (field, label) pairs that become mandatory once any user field is set.
    REQUIRED_FIELDS: ClassVar[tuple[tuple[str, str], ...]]
    DATE_FIELDS: ClassVar[tuple[str, ...]]

    def line_total(self) -> Decimal:
        raise NotImplementedError

    def _derive(self) -> None:
        object.__setattr__(self, "total_price", self.line_total())

    @property
    def is_blank(self) -> bool:
        """True when no user-entered field holds a value."""
        return not any(_has_value(getattr(self, name)) for name in self.USER_FIELDS)

    @classmethod
    def editable_fields(cls) -> frozenset[str]:
        return frozenset(
            f.name for f in fields(cls) if f.init and f.name not in _DERIVED_FIELDS
        )


@dataclass(frozen=True)
class HotelLine(_LineBehaviour):
    """A hotel stay: nights x price_per_night x num_rooms."""

    id: int
    destination_id: str = ""
    hotel_id: str = ""
    checkin: str = ""
    checkout: str = ""
    room_type: str = ""
    board_type: str = ""
    num_rooms: int | str = 1
    currency: str = ""
    price_per_night: str = ""
    nights: int = field(init=False, default=0)
    total_price: Decimal = field(init=False, default=ZERO)

    kind: ClassVar[ServiceKind] = ServiceKind.HOTELS
    USER_FIELDS: ClassVar[tuple[str, ...]] = (
        "destination_id", "hotel_id", "checkin", "checkout",
        "room_type", "board_type", "price_per_night",
    )
    REQUIRED_FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("destination_id", "destination"),
        ("hotel_id", "hotel"),
        ("checkin", "check-in date"),
        ("checkout", "check-out date"),
        ("room_type", "room type"),
        ("board_type", "board type"),
    )
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("checkin", "checkout")

    def __post_init__(self) -> None:
        object.__setattr__(self, "nights", nights_between(self.checkin, self.checkout))
        self._derive()

    def line_total(self) -> Decimal:
        return (
            Decimal(nights_between(self.checkin, self.checkout))
            * parse_amount_or_zero(self.price_per_night)
            * parse_quantity_or_zero(self.num_rooms)
        )


@dataclass(frozen=True)
class TransportationLine(_LineBehaviour):
    """Ground transport: price_per_day x num_days x num_vehicles."""

    id: int
    destination_id: str = ""
    date: str = ""
    description: str = ""
    vehicle_type: str = ""
    num_days: int | str = 1
    num_vehicles: int | str = 1
    currency: str = ""
    price_per_day: str = ""
    total_price: Decimal = field(init=False, default=ZERO)

    kind: ClassVar[ServiceKind] = ServiceKind.TRANSPORTATION
    USER_FIELDS: ClassVar[tuple[str, ...]] = (
        "destination_id", "date", "vehicle_type", "description", "price_per_day",
    )
    REQUIRED_FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("destination_id", "destination"),
        ("date", "date"),
        ("vehicle_type", "vehicle type"),
    )
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("date",)

    def __post_init__(self) -> None:
        self._derive()

    def line_total(self) -> Decimal:
        return (
            parse_amount_or_zero(self.price_per_day)
            * parse_quantity_or_zero(self.num_days)
            * parse_quantity_or_zero(self.num_vehicles)
        )


@dataclass(frozen=True)
class FlightLine(_LineBehaviour):
    """A flight segment: price_per_pax x pax. Flights carry no destination."""

    id: int
    date: str = ""
    departure: str = ""
    arrival: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    flight_type: str = ""
    airline: str = ""
    pax: int | str = 1
    currency: str = ""
    price_per_pax: str = ""
    total_price: Decimal = field(init=False, default=ZERO)

    kind: ClassVar[ServiceKind] = ServiceKind.FLIGHTS
    USER_FIELDS: ClassVar[tuple[str, ...]] = (
        "flight_type", "departure", "arrival", "date", "price_per_pax",
    )
    REQUIRED_FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("flight_type", "flight type"),
        ("departure", "departure"),
        ("arrival", "arrival"),
        ("date", "date"),
    )
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("date",)

    def __post_init__(self) -> None:
        self._derive()

    def line_total(self) -> Decimal:
        return parse_amount_or_zero(self.price_per_pax) * parse_quantity_or_zero(self.pax)


@dataclass(frozen=True)
class RentACarLine(_LineBehaviour):
    """A car rental: price_per_day x num_days (num_cars is informational)."""

    id: int
    destination_id: str = ""
    pickup_date: str = ""
    dropoff_date: str = ""
    pickup_location: str = ""
    dropoff_location: str = ""
    car_type: str = ""
    num_days: int | str = 1
    num_cars: int | str = 1
    currency: str = ""
    price_per_day: str = ""
    total_price: Decimal = field(init=False, default=ZERO)

    kind: ClassVar[ServiceKind] = ServiceKind.RENT_A_CAR
    USER_FIELDS: ClassVar[tuple[str, ...]] = (
        "destination_id", "car_type", "pickup_location", "dropoff_location",
        "pickup_date", "dropoff_date", "price_per_day",
    )
    REQUIRED_FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("destination_id", "destination"),
        ("car_type", "car type"),
        ("pickup_location", "pickup location"),
        ("dropoff_location", "dropoff location"),
        ("pickup_date", "pickup date"),
        ("dropoff_date", "dropoff date"),
    )
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("pickup_date", "dropoff_date")

    def __post_init__(self) -> None:
        self._derive()

    def line_total(self) -> Decimal:
        return parse_amount_or_zero(self.price_per_day) * parse_quantity_or_zero(self.num_days)


@dataclass(frozen=True)
class AdditionalServiceLine(_LineBehaviour):
    """Guides, tours, transfers...: price_per_day x num_days x num_people."""

    id: int
    destination_id: str = ""
    date: str = ""
    description: str = ""
    service_type: str = ""
    num_days: int | str = 1
    num_people: int | str = 1
    currency: str = ""
    price_per_day: str = ""
    total_price: Decimal = field(init=False, default=ZERO)

    kind: ClassVar[ServiceKind] = ServiceKind.ADDITIONAL_SERVICES
    USER_FIELDS: ClassVar[tuple[str, ...]] = (
        "destination_id", "date", "description", "service_type", "price_per_day",
    )
    REQUIRED_FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("destination_id", "destination"),
        ("date", "date"),
        ("service_type", "service type"),
    )
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("date",)

    def __post_init__(self) -> None:
        self._derive()

    def line_total(self) -> Decimal:
        return (
            parse_amount_or_zero(self.price_per_day)
            * parse_quantity_or_zero(self.num_days)
            * parse_quantity_or_zero(self.num_people)
        )


LineItem = Union[
    HotelLine, TransportationLine, FlightLine, RentACarLine, AdditionalServiceLine
]

_LINE_CLASSES: dict[ServiceKind, type] = {
    ServiceKind.HOTELS: HotelLine,
    ServiceKind.TRANSPORTATION: TransportationLine,
    ServiceKind.FLIGHTS: FlightLine,
    ServiceKind.RENT_A_CAR: RentACarLine,
    ServiceKind.ADDITIONAL_SERVICES: AdditionalServiceLine,
}


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def line_class_for(kind: ServiceKind | str) -> type:
    return _LINE_CLASSES[ServiceKind.parse(kind)]


def new_line(kind: ServiceKind | str, line_id: int, currency: str = "") -> LineItem:
    """A blank row: default quantities, no user input, currency tag preset."""
    return line_class_for(kind)(id=line_id, currency=currency)


def next_line_id(lines: Iterable[LineItem]) -> int:
    """Next free id within one collection (max + 1, starting at 1)."""
    return max((line.id for line in lines), default=0) + 1


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------


def _check_fields(line: LineItem, changes: dict[str, Any]) -> None:
    allowed = line.editable_fields()
    for name in changes:
        if name not in allowed:
            raise UnknownLineFieldError(line.kind.value, name)


def _update_hotel(line: HotelLine, changes: dict[str, Any]) -> HotelLine:
    cleared: dict[str, Any] = {}
    if "destination_id" in changes and changes["destination_id"] != line.destination_id:
        cleared = {"hotel_id": "", "room_type": "", "board_type": "", "currency": ""}
    elif "hotel_id" in changes and changes["hotel_id"] != line.hotel_id:
        cleared = {"room_type": "", "board_type": "", "currency": ""}
    # Values supplied alongside the triggering change win over the clear.
    return replace(line, **{**cleared, **changes})


def update_line(line: LineItem, **changes: Any) -> LineItem:
    """
    Apply an edit to a line and return the new value.

    Derived values (nights, total_price) are recomputed by construction.
    Hotel edits apply the cascading-clear rule.

    Raises:
        UnknownLineFieldError: if a change names a non-editable field.
    """
    _check_fields(line, changes)
    match line:
        case HotelLine():
            return _update_hotel(line, changes)
        case TransportationLine():
            return replace(line, **changes)
        case FlightLine():
            return replace(line, **changes)
        case RentACarLine():
            return replace(line, **changes)
        case AdditionalServiceLine():
            return replace(line, **changes)
        case _:
            raise TypeError(f"Not a line item: {type(line).__name__}")


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


def line_to_dict(line: LineItem) -> dict[str, Any]:
    """Plain JSON-ready copy of a line, derived values included."""
    data: dict[str, Any] = {}
    for f in fields(line):
        value = getattr(line, f.name)
        data[f.name] = str(value) if isinstance(value, Decimal) else value
    return data


def line_from_dict(kind: ServiceKind | str, data: dict[str, Any]) -> LineItem:
    """Rebuild a line from ``line_to_dict`` output; derived values are recomputed."""
    cls = line_class_for(kind)
    init_names = {f.name for f in fields(cls) if f.init}
    return cls(**{k: v for k, v in data.items() if k in init_names})
