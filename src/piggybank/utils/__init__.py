"""Utility functions for piggybank."""

from piggybank.utils.date_parser import parse_date, parse_iso_date
from piggybank.utils.amount_parser import parse_amount, to_amount, format_amount
from piggybank.utils.id_parser import parse_uuid, parse_enum
from piggybank.utils.split_parser import SplitSpec, parse_split_spec

# account_resolver is imported directly: it depends on the domain services

__all__ = [
    "parse_date",
    "parse_iso_date",
    "parse_amount",
    "to_amount",
    "format_amount",
    "parse_uuid",
    "parse_enum",
    "SplitSpec",
    "parse_split_spec",
]
