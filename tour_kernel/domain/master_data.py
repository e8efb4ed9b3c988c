"""
Master data -- read-only reference records and label resolution.

Responsibility:
    Declares the records the kernel reads from the master-data store
    (destinations, hotels, agencies, users, sources), the provider protocol
    it consumes, an in-memory provider, and ReferenceResolver, which turns
    ids into display labels and hotel option lists.

Architecture position:
    Kernel > Domain.  The provider is an injected collaborator; the kernel
    never writes master data.

Failure modes:
    None raised.  A dangling id resolves to an "Unknown X" label, and an
    unknown hotel has no options (its line is not option-checked).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, runtime_checkable

UNKNOWN_DESTINATION = "Unknown Destination"
UNKNOWN_HOTEL = "Unknown Hotel"
UNKNOWN_AGENCY = "Unknown Agency"
UNKNOWN_USER = "Unknown User"
UNKNOWN_SOURCE = "Unknown Source"


@dataclass(frozen=True)
class Destination:
    id: str
    name: str
    country: str = ""


@dataclass(frozen=True)
class Hotel:
    """A hotel and the options a line may pick for it."""

    id: str
    name: str
    destination_id: str
    room_types: tuple[str, ...] = ()
    board_types: tuple[str, ...] = ()
    currencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class Agency:
    id: str
    name: str


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str = ""


@dataclass(frozen=True)
class Source:
    id: str
    name: str


@dataclass(frozen=True)
class HotelOptions:
    room_types: tuple[str, ...] = ()
    board_types: tuple[str, ...] = ()
    currencies: tuple[str, ...] = ()


@runtime_checkable
class MasterDataProvider(Protocol):
    """Read-only lookups by id. Each getter returns None for an unknown id."""

    def get_destination(self, destination_id: str) -> Destination | None: ...

    def get_hotel(self, hotel_id: str) -> Hotel | None: ...

    def get_agency(self, agency_id: str) -> Agency | None: ...

    def get_user(self, user_id: str) -> User | None: ...

    def get_source(self, source_id: str) -> Source | None: ...

    def list_hotels(self, destination_id: str | None = None) -> list[Hotel]: ...


class InMemoryMasterData:
    """Dict-backed MasterDataProvider for tests and small deployments."""

    def __init__(
        self,
        destinations: Iterable[Destination] = (),
        hotels: Iterable[Hotel] = (),
        agencies: Iterable[Agency] = (),
        users: Iterable[User] = (),
        sources: Iterable[Source] = (),
    ) -> None:
        self._destinations = {d.id: d for d in destinations}
        self._hotels = {h.id: h for h in hotels}
        self._agencies = {a.id: a for a in agencies}
        self._users = {u.id: u for u in users}
        self._sources = {s.id: s for s in sources}

    def get_destination(self, destination_id: str) -> Destination | None:
        return self._destinations.get(destination_id)

    def get_hotel(self, hotel_id: str) -> Hotel | None:
        return self._hotels.get(hotel_id)

    def get_agency(self, agency_id: str) -> Agency | None:
        return self._agencies.get(agency_id)

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_source(self, source_id: str) -> Source | None:
        return self._sources.get(source_id)

    def list_hotels(self, destination_id: str | None = None) -> list[Hotel]:
        return [
            h for h in self._hotels.values()
            if destination_id is None or h.destination_id == destination_id
        ]


class ReferenceResolver:
    """Id -> label resolution with placeholder labels for dangling ids."""

    def __init__(self, provider: MasterDataProvider) -> None:
        self._provider = provider

    def destination_name(self, destination_id: str) -> str:
        record = self._provider.get_destination(destination_id) if destination_id else None
        return record.name if record else UNKNOWN_DESTINATION

    def destination_names(self, destination_ids: Iterable[str]) -> list[str]:
        return [self.destination_name(d) for d in destination_ids]

    def hotel_name(self, hotel_id: str) -> str:
        record = self._provider.get_hotel(hotel_id) if hotel_id else None
        return record.name if record else UNKNOWN_HOTEL

    def agency_name(self, agency_id: str) -> str:
        record = self._provider.get_agency(agency_id) if agency_id else None
        return record.name if record else UNKNOWN_AGENCY

    def user_name(self, user_id: str) -> str:
        record = self._provider.get_user(user_id) if user_id else None
        return record.name if record else UNKNOWN_USER

    def source_name(self, source_id: str) -> str:
        record = self._provider.get_source(source_id) if source_id else None
        return record.name if record else UNKNOWN_SOURCE

    def hotel_options(self, hotel_id: str) -> HotelOptions:
        """Room types, board types and currencies offered by a hotel."""
        hotel = self._provider.get_hotel(hotel_id) if hotel_id else None
        if hotel is None:
            return HotelOptions()
        return HotelOptions(hotel.room_types, hotel.board_types, hotel.currencies)

    def hotels_for_destination(self, destination_id: str) -> list[Hotel]:
        if not destination_id:
            return []
        return self._provider.list_hotels(destination_id)

    def hotel_selection_errors(
        self,
        destination_id: str,
        hotel_id: str,
        room_type: str,
        board_type: str,
        currency: str,
        prefix: str,
    ) -> list[str]:
        """
        Option checks for a hotel line against its hotel record.

        A hotel id that resolves to nothing is tolerated (no errors); the
        label renders as "Unknown Hotel".  Blank selections are not checked.
        """
        hotel = self._provider.get_hotel(hotel_id) if hotel_id else None
        if hotel is None:
            return []
        errors = []
        if destination_id and hotel.destination_id != destination_id:
            errors.append(
                f"{prefix}: {hotel.name} is not in {self.destination_name(destination_id)}"
            )
        if room_type and room_type not in hotel.room_types:
            errors.append(f"{prefix}: room type {room_type} is not offered by {hotel.name}")
        if board_type and board_type not in hotel.board_types:
            errors.append(f"{prefix}: board type {board_type} is not offered by {hotel.name}")
        if currency and hotel.currencies and currency not in hotel.currencies:
            errors.append(f"{prefix}: {hotel.name} does not quote in {currency}")
        return errors
