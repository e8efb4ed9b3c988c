"""
Service kinds -- the five bookable service collections and their voucher types.

A proposal holds one collection per ``ServiceKind``.  Line ids are unique
only within a collection, so a line is always addressed as (kind, id).
When a line is confirmed, the voucher records the matching ``ServiceType``
wire value ("hotel", "rentacar", ...).
"""

from __future__ import annotations

from enum import Enum

from tour_kernel.exceptions import UnknownServiceKindError


class ServiceKind(str, Enum):
    """Proposal line-item collections, keyed by their wire names."""

    HOTELS = "hotels"
    TRANSPORTATION = "transportation"
    FLIGHTS = "flights"
    RENT_A_CAR = "rentACar"
    ADDITIONAL_SERVICES = "additionalServices"

    @property
    def collection_attr(self) -> str:
        """Attribute name of this collection on ``Proposal``."""
        return _COLLECTION_ATTRS[self]

    @property
    def label(self) -> str:
        """Singular human label used in validation messages."""
        return _LABELS[self]

    @property
    def voucher_type(self) -> ServiceType:
        return _VOUCHER_TYPES[self]

    @classmethod
    def parse(cls, value: ServiceKind | str) -> ServiceKind:
        """
        Resolve a kind from its enum, wire name ("rentACar") or attribute
        name ("rent_a_car").

        Raises:
            UnknownServiceKindError: for anything else.
        """
        if isinstance(value, ServiceKind):
            return value
        if isinstance(value, str):
            for kind in cls:
                if value in (kind.value, kind.collection_attr):
                    return kind
        raise UnknownServiceKindError(str(value))


class ServiceType(str, Enum):
    """Voucher service type wire values."""

    HOTEL = "hotel"
    TRANSPORTATION = "transportation"
    FLIGHT = "flight"
    RENTACAR = "rentacar"
    ADDITIONAL = "additional"

    @property
    def kind(self) -> ServiceKind:
        return _KINDS_BY_TYPE[self]


_COLLECTION_ATTRS: dict[ServiceKind, str] = {
    ServiceKind.HOTELS: "hotels",
    ServiceKind.TRANSPORTATION: "transportation",
    ServiceKind.FLIGHTS: "flights",
    ServiceKind.RENT_A_CAR: "rent_a_car",
    ServiceKind.ADDITIONAL_SERVICES: "additional_services",
}

_LABELS: dict[ServiceKind, str] = {
    ServiceKind.HOTELS: "Hotel",
    ServiceKind.TRANSPORTATION: "Transportation",
    ServiceKind.FLIGHTS: "Flight",
    ServiceKind.RENT_A_CAR: "Rent a car",
    ServiceKind.ADDITIONAL_SERVICES: "Additional service",
}

_VOUCHER_TYPES: dict[ServiceKind, ServiceType] = {
    ServiceKind.HOTELS: ServiceType.HOTEL,
    ServiceKind.TRANSPORTATION: ServiceType.TRANSPORTATION,
    ServiceKind.FLIGHTS: ServiceType.FLIGHT,
    ServiceKind.RENT_A_CAR: ServiceType.RENTACAR,
    ServiceKind.ADDITIONAL_SERVICES: ServiceType.ADDITIONAL,
}

_KINDS_BY_TYPE: dict[ServiceType, ServiceKind] = {
    service_type: kind for kind, service_type in _VOUCHER_TYPES.items()
}
