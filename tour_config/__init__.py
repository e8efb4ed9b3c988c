"""
tour_config -- single public entrypoint for quoting configuration.

Responsibility:
    Provides the ONLY way to obtain a QuotingPolicy at runtime through
    ``get_active_config()``.  No other component reads configuration files.

Architecture position:
    Configuration layer, above ``tour_kernel``.  The kernel MUST NEVER import
    from ``tour_config``; it receives the QuotingPolicy this package builds.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested name.
    - ``ValueError`` -- unknown keys or values QuotingPolicy rejects.
    - ``yaml.YAMLError`` -- invalid YAML.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``TOUR_CONFIG_TRACE`` log entry with the set name, version and SHA-256
    checksum, tying every quote back to the configuration that priced it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tour_config.loader import compute_checksum, load_yaml_file, parse_policy
from tour_kernel.domain.policy import QuotingPolicy

_logger = logging.getLogger("tour_kernel.config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    name: str = "default",
    config_dir: Path | None = None,
) -> QuotingPolicy:
    """The ONLY public configuration entrypoint.

    Args:
        name: Configuration set name; reads ``<config_dir>/<name>.yaml``.
        config_dir: Override path to the sets directory.
            Defaults to tour_config/sets/.

    Raises:
        FileNotFoundError: If the set does not exist.
        ValueError: If the set fails validation.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Configuration set not found: {path}")

    data = load_yaml_file(path)
    policy = parse_policy(data)
    checksum = compute_checksum(data)

    _logger.info(
        "TOUR_CONFIG_TRACE",
        extra={
            "trace_type": "TOUR_CONFIG_TRACE",
            "config_set_name": policy.name,
            "config_set_version": data.get("version"),
            "checksum": checksum,
            "default_currency": policy.default_currency,
            "agency_source_count": len(policy.agency_source_ids),
        },
    )
    return policy


def list_config_sets(config_dir: Path | None = None) -> list[str]:
    """Names of the available configuration sets."""
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    if not sets_dir.is_dir():
        return []
    return sorted(p.stem for p in sets_dir.glob("*.yaml"))


__all__ = ["get_active_config", "list_config_sets"]
