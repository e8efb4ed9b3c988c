"""
Tour Kernel - proposal pricing and confirmation engine.

A tour-operator quoting core with:
- Multi-service line items (hotels, transportation, flights, car rental,
  additional services)
- Lenient-zero price parsing and full-precision Decimal aggregation
- Additive margin and commission pricing
- NEW -> CONFIRMED proposal lifecycle with per-service voucher generation
- Frozen voucher snapshots and an independent voucher payment lifecycle
"""

__version__ = "0.1.0"
