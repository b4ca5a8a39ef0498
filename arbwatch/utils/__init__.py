"""Utility modules."""

from arbwatch.utils.units import from_base_units, to_base_units

__all__ = [
    "from_base_units",
    "to_base_units",
]
