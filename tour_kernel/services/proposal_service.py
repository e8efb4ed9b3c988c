"""
ProposalService -- creating and editing proposals.

Responsibility:
    The write side of the quoting flow before confirmation: create a
    proposal with policy defaults, edit its basic info and line items, run
    the two validation gates, price it, cancel it, and copy it into a new
    draft.

Architecture position:
    Kernel > Services.  Orchestrates the pure domain (line_items,
    validation, pricing, lifecycles) and persists through the repository.

Invariants enforced:
    CONFIRMED_PROPOSAL_FROZEN -- every mutation loads the proposal and
        rejects it unless its status is NEW.  Edits to a confirmed quote go
        through copy_proposal().
    CASCADING_CLEAR -- line edits go through domain update_line().
    Hotel option checks -- a hotel line's room type, board type and
        currency must be offered by its hotel, and the hotel must belong to
        the line's destination.  Unknown hotels are tolerated.

Failure modes:
    - ProposalNotFoundError, ProposalNotEditableError, InvalidTransitionError
    - LineItemNotFoundError, UnknownLineFieldError, UnknownServiceKindError
    - UnknownProposalFieldError for a basic-info field a proposal lacks
    - InvalidCurrencyError for a currency outside the policy's list
    - ValidationFailure from the hotel option checks and the ensure_* gates

Audit relevance:
    Every successful mutation logs a snake_case event carrying the
    proposal id and reference; rejections log at WARNING with the error code.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Any, Callable
from uuid import UUID, uuid4

from tour_kernel.domain.clock import Clock
from tour_kernel.domain.lifecycles import PROPOSAL_WORKFLOW, ProposalStatus
from tour_kernel.domain.line_items import (
    HotelLine,
    LineItem,
    new_line,
    next_line_id,
    update_line,
)
from tour_kernel.domain.master_data import (
    InMemoryMasterData,
    MasterDataProvider,
    ReferenceResolver,
)
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.domain.pricing import ProposalTotals, compute_proposal_totals
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind
from tour_kernel.domain.validation import validate_basic_info, validate_itinerary
from tour_kernel.domain.values import Currency
from tour_kernel.domain.workflow import resolve_transition
from tour_kernel.exceptions import (
    InvalidCurrencyError,
    LineItemNotFoundError,
    ProposalNotEditableError,
    UnknownProposalFieldError,
    ValidationFailure,
)
from tour_kernel.invariants import KernelInvariant
from tour_kernel.logging_config import LogContext, get_logger
from tour_kernel.repositories.base import QuotingRepository
from tour_kernel.services.base import BaseService
from tour_kernel.utils.references import generate_proposal_reference

logger = get_logger("services.proposal")

BASIC_INFO_FIELDS = frozenset({
    "source",
    "sales_person_id",
    "destination_ids",
    "agency_id",
    "estimated_nights",
    "overall_margin",
    "commission",
    "pdf_language",
    "display_currency",
    "proposal_currency",
    "proposal_start_date",
    "proposal_end_date",
})

_MAX_REFERENCE_ATTEMPTS = 50


def _check_basic_fields(values: dict[str, Any]) -> None:
    for name in values:
        if name not in BASIC_INFO_FIELDS:
            raise UnknownProposalFieldError(name)


def _coerce_basic(values: dict[str, Any]) -> dict[str, Any]:
    coerced = dict(values)
    if "destination_ids" in coerced:
        coerced["destination_ids"] = tuple(coerced["destination_ids"] or ())
    for name in ("overall_margin", "commission"):
        if name in coerced and coerced[name] is not None:
            coerced[name] = str(coerced[name])
    return coerced


class ProposalService(BaseService):
    """
    Contract:
        Every public method takes a proposal id, loads the current value
        from the repository and returns the new value after saving it.

    Guarantees:
        - A rejected call has no side effects.
        - Returned proposals are exactly what the repository now holds.

    Non-goals:
        - Does NOT confirm proposals -- see ConfirmationService.
        - Does NOT search or list -- see ProposalSelector.
    """

    def __init__(
        self,
        repository: QuotingRepository,
        master_data: MasterDataProvider | None = None,
        policy: QuotingPolicy | None = None,
        clock: Clock | None = None,
        id_factory: Callable[[], UUID] = uuid4,
        rng: random.Random | None = None,
    ):
        super().__init__(repository, clock=clock, policy=policy)
        self._resolver = ReferenceResolver(master_data or InMemoryMasterData())
        self._id_factory = id_factory
        self._rng = rng

    # ------------------------------------------------------------------
    # Lookups and helpers
    # ------------------------------------------------------------------

    def get_proposal(self, proposal_id: UUID) -> Proposal:
        return self._require_proposal(proposal_id)

    def _require_editable(self, proposal_id: UUID) -> Proposal:
        proposal = self._require_proposal(proposal_id)
        if not proposal.is_editable:
            error = ProposalNotEditableError(str(proposal_id), proposal.status.value)
            logger.warning(
                "proposal_not_editable",
                extra={
                    "proposal_id": str(proposal_id),
                    "status": proposal.status.value,
                    "code": error.code,
                    "invariant": KernelInvariant.CONFIRMED_PROPOSAL_FROZEN.value,
                },
            )
            raise error
        return proposal

    def _normalize_currency(self, code: Any) -> str:
        text = str(code or "").strip()
        try:
            normalized = Currency(text).code
        except ValueError as e:
            raise InvalidCurrencyError(text) from e
        if normalized not in self._policy.supported_currencies:
            raise InvalidCurrencyError(normalized)
        return normalized

    def _new_reference(self, year: int) -> str:
        taken = {p.reference for p in self.repository.list_proposals()}
        for _ in range(_MAX_REFERENCE_ATTEMPTS):
            reference = generate_proposal_reference(
                self._policy.reference_prefix, year, self._rng
            )
            if reference not in taken:
                return reference
        raise RuntimeError(
            f"Could not allocate a free {self._policy.reference_prefix}-{year} reference"
        )

    def _save(self, proposal: Proposal) -> Proposal:
        with self.repository.atomic():
            self.repository.save_proposal(proposal)
        return proposal

    def _check_hotel_options(self, proposal: Proposal, line: LineItem, position: int) -> None:
        if not isinstance(line, HotelLine):
            return
        errors = self._hotel_option_errors(proposal, line, position)
        if errors:
            logger.warning(
                "hotel_options_rejected",
                extra={"line_id": line.id, "errors": errors, "code": ValidationFailure.code},
            )
            raise ValidationFailure(errors)

    def _hotel_option_errors(
        self, proposal: Proposal, line: HotelLine, position: int
    ) -> list[str]:
        # Blank tags price in the proposal currency; the hotel must quote that.
        return self._resolver.hotel_selection_errors(
            destination_id=line.destination_id,
            hotel_id=line.hotel_id,
            room_type=line.room_type,
            board_type=line.board_type,
            currency=proposal.line_currency(line),
            prefix=f"{line.kind.label} {position}",
        )

    @staticmethod
    def _locate(proposal: Proposal, kind: ServiceKind, line_id: int) -> int:
        for index, line in enumerate(proposal.lines(kind)):
            if line.id == line_id:
                return index
        raise LineItemNotFoundError(kind.value, line_id)

    # ------------------------------------------------------------------
    # Creation and basic info
    # ------------------------------------------------------------------

    def create_proposal(self, **basic_info: Any) -> Proposal:
        """
        Create a NEW proposal with policy defaults.

        Any basic-info field may be passed; unspecified ones take the
        policy defaults (margin, commission, currency, PDF language) and
        the display currency is the proposal currency in lower case.
        """
        _check_basic_fields(basic_info)
        values = _coerce_basic(basic_info)
        currency = self._normalize_currency(
            values.pop("proposal_currency", None) or self._policy.default_currency
        )
        now = self._clock.now_utc()

        proposal = Proposal(
            id=self._id_factory(),
            reference=self._new_reference(now.year),
            status=ProposalStatus.NEW,
            created_at=now,
            overall_margin=self._policy.default_margin,
            commission=self._policy.default_commission,
            pdf_language=self._policy.default_pdf_language,
            display_currency=currency.lower(),
            proposal_currency=currency,
        )
        proposal = self._save(replace(proposal, **values))

        logger.info(
            "proposal_created",
            extra={
                "proposal_id": str(proposal.id),
                "reference": proposal.reference,
                "currency": proposal.proposal_currency,
                "source": proposal.source,
            },
        )
        return proposal

    def update_basic_info(self, proposal_id: UUID, **changes: Any) -> Proposal:
        """
        Edit basic info.  A currency change retags lines that carried the
        old currency; blank tags keep inheriting.
        """
        _check_basic_fields(changes)
        with LogContext.bind(proposal_id=str(proposal_id)):
            proposal = self._require_editable(proposal_id)
            updates = _coerce_basic(changes)

            if "proposal_currency" in updates:
                new_currency = self._normalize_currency(updates["proposal_currency"])
                updates["proposal_currency"] = new_currency
                old_currency = proposal.proposal_currency
                if new_currency != old_currency:
                    proposal = self._retag_lines(proposal, old_currency, new_currency)
                    if (
                        "display_currency" not in updates
                        and proposal.display_currency == old_currency.lower()
                    ):
                        updates["display_currency"] = new_currency.lower()

            updated = self._save(replace(proposal, **updates))
            logger.info(
                "proposal_basic_info_updated",
                extra={"reference": updated.reference, "fields": sorted(changes)},
            )
            return updated

    @staticmethod
    def _retag_lines(proposal: Proposal, old: str, new: str) -> Proposal:
        for kind in ServiceKind:
            lines = tuple(
                update_line(line, currency=new)
                if (line.currency or "").strip().upper() == old
                else line
                for line in proposal.lines(kind)
            )
            proposal = proposal.with_lines(kind, lines)
        return proposal

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_line(self, proposal_id: UUID, kind: ServiceKind | str, **fields: Any) -> Proposal:
        """Append a row (blank unless fields are given) with the next free id."""
        kind = ServiceKind.parse(kind)
        with LogContext.bind(proposal_id=str(proposal_id)):
            proposal = self._require_editable(proposal_id)
            lines = proposal.lines(kind)
            line = new_line(kind, next_line_id(lines), currency=proposal.proposal_currency)
            if fields:
                # The preset currency tag survives the hotel cascade unless replaced.
                line = update_line(line, **{"currency": line.currency, **fields})
            self._check_hotel_options(proposal, line, len(lines) + 1)

            updated = self._save(proposal.with_lines(kind, lines + (line,)))
            logger.info(
                "proposal_line_added",
                extra={"kind": kind.value, "line_id": line.id},
            )
            return updated

    def update_line(
        self,
        proposal_id: UUID,
        kind: ServiceKind | str,
        line_id: int,
        **changes: Any,
    ) -> Proposal:
        """Edit one line; nights and total are recomputed, hotel cascades applied."""
        kind = ServiceKind.parse(kind)
        with LogContext.bind(proposal_id=str(proposal_id)):
            proposal = self._require_editable(proposal_id)
            index = self._locate(proposal, kind, line_id)
            lines = list(proposal.lines(kind))
            line = update_line(lines[index], **changes)
            self._check_hotel_options(proposal, line, index + 1)
            lines[index] = line

            updated = self._save(proposal.with_lines(kind, tuple(lines)))
            logger.info(
                "proposal_line_updated",
                extra={
                    "kind": kind.value,
                    "line_id": line_id,
                    "fields": sorted(changes),
                    "total_price": line.total_price,
                },
            )
            return updated

    def remove_line(self, proposal_id: UUID, kind: ServiceKind | str, line_id: int) -> Proposal:
        kind = ServiceKind.parse(kind)
        with LogContext.bind(proposal_id=str(proposal_id)):
            proposal = self._require_editable(proposal_id)
            self._locate(proposal, kind, line_id)
            lines = tuple(line for line in proposal.lines(kind) if line.id != line_id)

            updated = self._save(proposal.with_lines(kind, lines))
            logger.info("proposal_line_removed", extra={"kind": kind.value, "line_id": line_id})
            return updated

    def duplicate_line(self, proposal_id: UUID, kind: ServiceKind | str, line_id: int) -> Proposal:
        """Append a copy of a line under the next free id."""
        kind = ServiceKind.parse(kind)
        with LogContext.bind(proposal_id=str(proposal_id)):
            proposal = self._require_editable(proposal_id)
            lines = proposal.lines(kind)
            original = lines[self._locate(proposal, kind, line_id)]
            copy = replace(original, id=next_line_id(lines))

            updated = self._save(proposal.with_lines(kind, lines + (copy,)))
            logger.info(
                "proposal_line_duplicated",
                extra={"kind": kind.value, "line_id": line_id, "new_line_id": copy.id},
            )
            return updated

    # ------------------------------------------------------------------
    # Gates and pricing
    # ------------------------------------------------------------------

    def check_basic_info(self, proposal_id: UUID) -> list[str]:
        proposal = self._require_proposal(proposal_id)
        return validate_basic_info(proposal, self._policy.agency_source_ids)

    def check_itinerary(self, proposal_id: UUID) -> list[str]:
        """Itinerary gate plus hotel option checks against master data."""
        proposal = self._require_proposal(proposal_id)
        errors = validate_itinerary(proposal, self._policy.enforce_date_range)
        for position, line in enumerate(proposal.hotels, start=1):
            if not line.is_blank:
                errors.extend(self._hotel_option_errors(proposal, line, position))
        return errors

    def ensure_basic_info(self, proposal_id: UUID) -> None:
        errors = self.check_basic_info(proposal_id)
        if errors:
            logger.warning(
                "basic_info_gate_failed",
                extra={"proposal_id": str(proposal_id), "error_count": len(errors)},
            )
            raise ValidationFailure(errors)

    def ensure_itinerary(self, proposal_id: UUID) -> None:
        errors = self.check_itinerary(proposal_id)
        if errors:
            logger.warning(
                "itinerary_gate_failed",
                extra={"proposal_id": str(proposal_id), "error_count": len(errors)},
            )
            raise ValidationFailure(errors)

    def compute_totals(self, proposal_id: UUID) -> ProposalTotals:
        return compute_proposal_totals(self._require_proposal(proposal_id))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cancel_proposal(self, proposal_id: UUID) -> Proposal:
        """NEW -> CANCELLED."""
        with LogContext.bind(proposal_id=str(proposal_id)):
            proposal = self._require_proposal(proposal_id)
            resolve_transition(PROPOSAL_WORKFLOW, proposal.status, ProposalStatus.CANCELLED)

            updated = self._save(proposal.with_status(ProposalStatus.CANCELLED))
            logger.info(
                "proposal_cancelled",
                extra={"reference": updated.reference, "from_state": proposal.status.value},
            )
            return updated

    def copy_proposal(self, proposal_id: UUID) -> Proposal:
        """
        Copy any proposal into a new NEW draft.

        The copy gets a fresh id, reference and created_at; line ids are
        renumbered from 1 in each collection.  Vouchers are not copied.
        """
        source = self._require_proposal(proposal_id)
        now = self._clock.now_utc()
        copy = replace(
            source,
            id=self._id_factory(),
            reference=self._new_reference(now.year),
            status=ProposalStatus.NEW,
            created_at=now,
        )
        for kind in ServiceKind:
            renumbered = tuple(
                replace(line, id=position)
                for position, line in enumerate(source.lines(kind), start=1)
            )
            copy = copy.with_lines(kind, renumbered)

        copy = self._save(copy)
        logger.info(
            "proposal_copied",
            extra={
                "proposal_id": str(copy.id),
                "reference": copy.reference,
                "copied_from": source.reference,
            },
        )
        return copy
