"""Filename heuristics used to derive document dates and titles."""

from .rules import (
    DATE_RULES,
    MONTHS,
    DateRule,
    match_rule,
    month_name,
    parse_document_date,
    parse_document_year,
    strip_extension,
)
from .titles import format_title

__all__ = [
    "DATE_RULES",
    "MONTHS",
    "DateRule",
    "format_title",
    "match_rule",
    "month_name",
    "parse_document_date",
    "parse_document_year",
    "strip_extension",
]
