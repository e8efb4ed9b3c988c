"""
Proposal references.

A reference is the human handle quoted to customers and printed on
vouchers: ``<PREFIX>-<YEAR>-<NNNN>``, e.g. ``TOMS-2024-0042``.  The number
is random, so callers that need uniqueness check for collisions.
"""

import random
import re

_REFERENCE_RE = re.compile(r"^[A-Za-z0-9]+-\d{4}-\d{4}$")


def generate_proposal_reference(
    prefix: str,
    year: int,
    rng: random.Random | None = None,
) -> str:
    """
    Build a reference for a proposal created in ``year``.

    Args:
        prefix: Alphanumeric prefix from QuotingPolicy.reference_prefix.
        year: Creation year (from the injected clock, never the system date).
        rng: Random source; pass a seeded ``random.Random`` for repeatable ids.
    """
    number = (rng or random).randrange(10000)
    return f"{prefix}-{year:04d}-{number:04d}"


def is_proposal_reference(value: str) -> bool:
    return bool(_REFERENCE_RE.match(value or ""))
