"""InMemoryQuotingRepository: atomic() rollback and voucher uniqueness."""

from dataclasses import replace
from uuid import UUID, uuid4

import pytest

from tour_kernel.domain.line_items import HotelLine
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceType
from tour_kernel.domain.voucher import Voucher
from tour_kernel.exceptions import DuplicateVoucherError, VoucherNotFoundError
from tour_kernel.repositories.base import QuotingRepository
from tour_kernel.repositories.memory import InMemoryQuotingRepository


def _voucher(proposal_id, service_id=1, voucher_id=None) -> Voucher:
    return Voucher(
        id=voucher_id or uuid4(),
        proposal_id=proposal_id,
        proposal_reference="TOMS-2024-0001",
        service_type=ServiceType.HOTEL,
        service_id=service_id,
        service_data=HotelLine(id=service_id),
    )


def test_satisfies_protocol(repository):
    assert isinstance(repository, QuotingRepository)


def test_atomic_restores_on_error():
    repository = InMemoryQuotingRepository()
    proposal = Proposal(id=uuid4(), reference="TOMS-2024-0001")
    repository.save_proposal(proposal)

    with pytest.raises(DuplicateVoucherError):
        with repository.atomic():
            repository.save_proposal(replace(proposal, source="changed"))
            repository.add_vouchers([_voucher(proposal.id), _voucher(proposal.id)])

    assert repository.load_proposal(proposal.id).source == ""
    assert repository.list_vouchers() == []


def test_same_line_id_under_two_kinds_is_not_a_duplicate(repository):
    pid = uuid4()
    flight = replace(_voucher(pid), service_type=ServiceType.FLIGHT)
    repository.add_vouchers([_voucher(pid), flight])
    assert len(repository.list_vouchers(pid)) == 2


def test_list_vouchers_filters_by_proposal(repository):
    a, b = uuid4(), uuid4()
    repository.add_vouchers([_voucher(a), _voucher(b)])
    assert [v.proposal_id for v in repository.list_vouchers(a)] == [a]
    assert len(repository.list_vouchers()) == 2


def test_save_voucher_keeps_snapshot(repository):
    voucher = _voucher(uuid4(), voucher_id=UUID(int=1))
    repository.add_vouchers([voucher])
    repository.save_voucher(replace(voucher, notes="x", service_data=HotelLine(id=99)))
    stored = repository.load_voucher(voucher.id)
    assert stored.notes == "x"
    assert stored.service_data == HotelLine(id=1)


def test_save_unknown_voucher(repository):
    with pytest.raises(VoucherNotFoundError):
        repository.save_voucher(_voucher(uuid4()))
