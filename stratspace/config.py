"""
Numeric scalar configurations for profile evaluation.

Profiles are generic over their scalar type. Two are supported:
- float: fast, approximate
- rational: exact arithmetic via fractions.Fraction
"""

from fractions import Fraction
from typing import List, Union


NUMERIC_TYPES = {
    "float": float,
    "rational": Fraction,
}

DEFAULT_NUMERIC = "float"


def get_numeric(name: str) -> type:
    """Get numeric scalar type by name."""
    if name not in NUMERIC_TYPES:
        raise ValueError(f"Unknown numeric type: {name}. Available: {list(NUMERIC_TYPES.keys())}")
    return NUMERIC_TYPES[name]


def list_numerics() -> List[str]:
    """List all available numeric type names."""
    return list(NUMERIC_TYPES.keys())


def resolve_numeric(numeric: Union[str, type, None]) -> type:
    """Accept a registered name, a registered type, or None for the default."""
    if numeric is None:
        return NUMERIC_TYPES[DEFAULT_NUMERIC]
    if isinstance(numeric, str):
        return get_numeric(numeric)
    if numeric not in NUMERIC_TYPES.values():
        raise ValueError(f"Unsupported numeric type: {numeric!r}. Available: {list_numerics()}")
    return numeric
