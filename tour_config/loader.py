"""
tour_config.loader -- YAML parsing for quoting configuration sets.

Responsibility:
    Reads one configuration set file and turns it into a QuotingPolicy.
    Also computes the SHA-256 checksum that identifies the exact set a
    process runs with.

Architecture position:
    Configuration layer.  Imports the kernel's QuotingPolicy; the kernel
    never imports this package.

Failure modes:
    - FileNotFoundError if the file does not exist.
    - yaml.YAMLError for invalid YAML syntax.
    - ValueError for unknown sections/keys or values QuotingPolicy rejects.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from tour_kernel.domain.policy import QuotingPolicy

_QUOTING_KEYS = frozenset({
    "default_currency",
    "default_margin",
    "default_commission",
    "default_pdf_language",
    "reference_prefix",
    "supported_currencies",
    "enforce_date_range",
    "recent_proposal_limit",
})
_CHANNEL_KEYS = frozenset({"agency_source_ids"})
_TOP_LEVEL_KEYS = frozenset({"name", "version", "description", "quoting", "channels"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _reject_unknown(section: str, data: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"Unknown keys in {section}: {', '.join(unknown)}")


def parse_policy(data: dict[str, Any]) -> QuotingPolicy:
    """
    Build a QuotingPolicy from a parsed configuration set.

    Numbers written without quotes (``default_margin: 15``) are kept as
    their decimal text.
    """
    _reject_unknown("configuration set", data, _TOP_LEVEL_KEYS)
    quoting = data.get("quoting") or {}
    channels = data.get("channels") or {}
    _reject_unknown("quoting", quoting, _QUOTING_KEYS)
    _reject_unknown("channels", channels, _CHANNEL_KEYS)

    kwargs: dict[str, Any] = {"name": str(data.get("name", "default"))}
    for key in ("default_currency", "default_pdf_language", "reference_prefix"):
        if key in quoting:
            kwargs[key] = str(quoting[key])
    for key in ("default_margin", "default_commission"):
        if key in quoting:
            kwargs[key] = str(quoting[key])
    if "supported_currencies" in quoting:
        kwargs["supported_currencies"] = tuple(str(c) for c in quoting["supported_currencies"])
    if "enforce_date_range" in quoting:
        kwargs["enforce_date_range"] = bool(quoting["enforce_date_range"])
    if "recent_proposal_limit" in quoting:
        kwargs["recent_proposal_limit"] = int(quoting["recent_proposal_limit"])
    if "agency_source_ids" in channels:
        kwargs["agency_source_ids"] = frozenset(str(s) for s in channels["agency_source_ids"] or ())

    return QuotingPolicy(**kwargs)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    SHA-256 of the canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
