"""Utility functions for cashflow."""

from cashflow.utils.date_parser import parse_date, parse_iso_date, get_date_range
from cashflow.utils.amount_parser import parse_amount, to_decimal
from cashflow.utils.serialization import encode_string_list, decode_string_list

__all__ = [
    "parse_date",
    "parse_iso_date",
    "get_date_range",
    "parse_amount",
    "to_decimal",
    "encode_string_list",
    "decode_string_list",
]
