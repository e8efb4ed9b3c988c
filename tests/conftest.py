"""
Pytest fixtures for the tour kernel test suite.

Provides:
- Structured logging configured once per run, plus a log capture fixture
- A deterministic clock and the default quoting policy
- A small master-data catalogue (destinations, hotels, agencies, users)
- In-memory repository and services wired to it
- SQLite sessions for the SQL repository tests

Environment Variables:
- DATABASE_URL: SQLAlchemy URL for the SQL repository tests.  Defaults to
  an in-memory SQLite database; set it to a PostgreSQL URL (with the
  ``postgres`` extra installed) to run the same tests against PostgreSQL.
"""

import json
import logging
import os
from datetime import datetime, timezone
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from tour_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from tour_kernel.domain.clock import DeterministicClock
from tour_kernel.domain.master_data import (
    Agency,
    Destination,
    Hotel,
    InMemoryMasterData,
    Source,
    User,
)
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from tour_kernel.repositories.memory import InMemoryQuotingRepository
from tour_kernel.selectors.proposal_selector import ProposalSelector
from tour_kernel.services.confirmation_service import ConfirmationService
from tour_kernel.services.proposal_service import ProposalService
from tour_kernel.services.voucher_service import VoucherService

DEFAULT_DATABASE_URL = "sqlite://"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture tour_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, confirmation_service):
            confirmation_service.confirm_proposal(...)
            logs = captured_logs()
            assert any(r["message"] == "proposal_confirmed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("tour_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def policy() -> QuotingPolicy:
    return QuotingPolicy(agency_source_ids=frozenset({"agency", "b2b"}))


@pytest.fixture
def master_data() -> InMemoryMasterData:
    """Two destinations, three hotels and the usual sales-side records."""
    return InMemoryMasterData(
        destinations=[
            Destination("ist", "Istanbul", "Turkey"),
            Destination("cap", "Cappadocia", "Turkey"),
        ],
        hotels=[
            Hotel(
                "pera",
                "Pera Palace",
                "ist",
                room_types=("Single", "Double", "Suite"),
                board_types=("BB", "HB"),
                currencies=("USD", "EUR"),
            ),
            Hotel(
                "sultan",
                "Sultan Inn",
                "ist",
                room_types=("Double",),
                board_types=("BB",),
                currencies=(),
            ),
            Hotel(
                "cave",
                "Cave Suites",
                "cap",
                room_types=("Cave Double",),
                board_types=("HB", "FB"),
                currencies=("TRY", "USD"),
            ),
        ],
        agencies=[Agency("ag-1", "Blue Travel")],
        users=[User("u-1", "Ayse Demir", "ayse@example.com")],
        sources=[Source("direct", "Direct"), Source("agency", "Agency")],
    )


@pytest.fixture
def repository() -> InMemoryQuotingRepository:
    return InMemoryQuotingRepository()


@pytest.fixture
def proposal_service(repository, master_data, policy, deterministic_clock) -> ProposalService:
    return ProposalService(
        repository,
        master_data=master_data,
        policy=policy,
        clock=deterministic_clock,
    )


@pytest.fixture
def confirmation_service(repository, policy, deterministic_clock) -> ConfirmationService:
    return ConfirmationService(repository, clock=deterministic_clock, policy=policy)


@pytest.fixture
def voucher_service(repository, deterministic_clock) -> VoucherService:
    return VoucherService(repository, clock=deterministic_clock)


@pytest.fixture
def proposal_selector(repository, master_data, policy) -> ProposalSelector:
    return ProposalSelector(repository, master_data=master_data, policy=policy)


@pytest.fixture
def basic_info() -> dict:
    """Basic info that passes the first gate."""
    return {
        "source": "direct",
        "sales_person_id": "u-1",
        "destination_ids": ["ist"],
        "proposal_start_date": "2024-03-10",
        "proposal_end_date": "2024-03-25",
    }


@pytest.fixture
def priced_proposal(proposal_service, basic_info):
    """
    A NEW proposal with one line per service kind, all in USD.

    Totals: hotel 1200, transportation 300, flight 500, rent a car 240,
    additional services 100.
    """
    proposal = proposal_service.create_proposal(**basic_info)
    pid = proposal.id
    proposal_service.add_line(
        pid, "hotels",
        destination_id="ist", hotel_id="pera", checkin="2024-03-15",
        checkout="2024-03-19", room_type="Double", board_type="BB",
        num_rooms=2, price_per_night="150",
    )
    proposal_service.add_line(
        pid, "transportation",
        destination_id="ist", date="2024-03-15", vehicle_type="Van",
        description="Airport transfer", num_days=1, num_vehicles=2,
        price_per_day="150",
    )
    proposal_service.add_line(
        pid, "flights",
        date="2024-03-16", departure="IST", arrival="NAV",
        flight_type="Domestic", airline="TK", pax=2, price_per_pax="250",
    )
    proposal_service.add_line(
        pid, "rentACar",
        destination_id="cap", pickup_date="2024-03-16", dropoff_date="2024-03-18",
        pickup_location="NAV", dropoff_location="NAV", car_type="SUV",
        num_days=2, num_cars=1, price_per_day="120",
    )
    return proposal_service.add_line(
        pid, "additionalServices",
        destination_id="cap", date="2024-03-17", service_type="Balloon",
        description="Sunrise flight", num_days=1, num_people=2,
        price_per_day="50",
    )


# =============================================================================
# Database fixtures
# =============================================================================


def get_database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


@pytest.fixture(scope="session")
def db_engine():
    engine = init_engine_from_url(get_database_url())
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    """
    Session joined to an outer transaction that is rolled back at teardown.

    ``session.commit()`` inside a test only releases a savepoint, so every
    test starts from empty tables.
    """
    conn = db_engine.connect()
    trans = conn.begin()
    sess = Session(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
    yield sess
    try:
        sess.close()
    finally:
        try:
            trans.rollback()
        finally:
            conn.close()
