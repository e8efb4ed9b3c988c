"""
Confirmation -- selection handling and voucher generation.

Responsibility:
    Turns a proposal plus a selection of line ids (keyed by collection) into
    one PENDING_PAYMENT voucher per resolvable id.  ConfirmationService wraps
    this with the lifecycle checks and the atomic write.

Architecture position:
    Kernel > Domain -- pure functions.  The voucher id factory is injected
    so tests can produce predictable ids.

Invariants enforced:
    SNAPSHOT_ON_CONFIRM -- each voucher's service_data is the line value
    itself; later edits to the proposal (after a copy) never reach it.
    Vouchers are produced in collection order (hotels, transportation,
    flights, rentACar, additionalServices), selection order within one.

Failure modes:
    - UnknownServiceKindError for a selection key that is not a collection.
    - ValidationFailure for a selection value that is not an id or a list.
    - Ids that match no line are returned as ``unresolved``; the caller
      decides what that means.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping
from uuid import UUID, uuid4

from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind
from tour_kernel.domain.voucher import Voucher
from tour_kernel.exceptions import ValidationFailure

Selection = Mapping[Any, Iterable[Any]]


@dataclass(frozen=True)
class UnresolvedSelection:
    kind: ServiceKind
    line_id: Any


@dataclass(frozen=True)
class ConfirmationResult:
    """Outcome of a successful confirmation."""

    proposal: Proposal
    vouchers: tuple[Voucher, ...]
    unresolved: tuple[UnresolvedSelection, ...] = ()


def _coerce_id(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return value


def _id_list(kind: ServiceKind, ids: Any) -> Iterable[Any]:
    if ids is None or ids == "":
        return ()
    if isinstance(ids, (str, int)) and not isinstance(ids, bool):
        return (ids,)
    if isinstance(ids, Iterable) and not isinstance(ids, Mapping):
        return ids
    raise ValidationFailure([f"Selection for {kind.value} must be an id or a list of ids"])


def normalize_selection(selection: Selection) -> dict[ServiceKind, tuple[Any, ...]]:
    """
    Parse keys into ServiceKinds and drop duplicate ids, keeping first-seen
    order.  Numeric strings ("3") are read as ints, and a lone id given
    without a list ({"hotels": "11"}) is one id, not a run of characters.

    Raises:
        UnknownServiceKindError: for a key that is not a collection name.
        ValidationFailure: for a value that is neither an id nor a list of ids.
    """
    normalized: dict[ServiceKind, list[Any]] = {}
    for key, ids in (selection or {}).items():
        kind = ServiceKind.parse(key)
        bucket = normalized.setdefault(kind, [])
        for raw in _id_list(kind, ids):
            line_id = _coerce_id(raw)
            if line_id not in bucket:
                bucket.append(line_id)
    return {kind: tuple(normalized[kind]) for kind in ServiceKind if kind in normalized}


def build_vouchers(
    proposal: Proposal,
    selection: Mapping[ServiceKind, Iterable[Any]],
    id_factory: Callable[[], UUID] = uuid4,
    created_at: datetime | None = None,
) -> tuple[tuple[Voucher, ...], tuple[UnresolvedSelection, ...]]:
    """One voucher per selected line that exists in the proposal."""
    vouchers: list[Voucher] = []
    unresolved: list[UnresolvedSelection] = []
    for kind in ServiceKind:
        for line_id in selection.get(kind, ()):
            line = proposal.find_line(kind, line_id)
            if line is None:
                unresolved.append(UnresolvedSelection(kind, line_id))
                continue
            vouchers.append(
                Voucher(
                    id=id_factory(),
                    proposal_id=proposal.id,
                    proposal_reference=proposal.reference,
                    service_type=kind.voucher_type,
                    service_id=line.id,
                    service_data=line,
                    source=proposal.source,
                    agency_id=proposal.agency_id,
                    sales_person_id=proposal.sales_person_id,
                    created_at=created_at,
                )
            )
    return tuple(vouchers), tuple(unresolved)
