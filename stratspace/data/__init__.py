"""Savefile formats."""

from .nfg import (
    write_nfg, to_nfg_string, read_nfg, from_nfg_string,
    iter_payoff_rows, quote_string, format_number, parse_number,
)

__all__ = [
    "write_nfg", "to_nfg_string", "read_nfg", "from_nfg_string",
    "iter_payoff_rows", "quote_string", "format_number", "parse_number",
]
