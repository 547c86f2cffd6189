"""Ordered filename rules that recover a document date from archive filenames.

Archived filenames follow several historical naming conventions and carry no
reliable embedded metadata, so the display date is inferred heuristically.
Rules are evaluated in order and the first rule that accepts a name decides
both the display year and the display date; later rules are never consulted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

MONTHS = (
    "",
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTH_ALTERNATION = "|".join(MONTHS[1:])
_EXTENSION = re.compile(r"\.[^.]+$")


def month_name(value: int | str) -> str:
    """Return the English month name for a 1-based month, or ``""`` when out of range."""
    try:
        index = int(value)
    except (TypeError, ValueError):
        return ""
    if 1 <= index <= 12:
        return MONTHS[index]
    return ""


def strip_extension(filename: str) -> str:
    """Remove the final ``.ext`` suffix from ``filename``."""
    return _EXTENSION.sub("", filename)


def _valid_month_day(month: str, day: str) -> bool:
    return 1 <= int(month) <= 12 and 1 <= int(day) <= 31


@dataclass(frozen=True, slots=True)
class DateRule:
    """A single naming convention.

    Attributes:
        name: Stable identifier reported by diagnostics.
        pattern: Regular expression searched within the extension-less filename.
        to_year: Builds the display year from a match.
        to_date: Builds the display date from a match.
        accept: Extra validation a match must pass for the rule to apply.
    """

    name: str
    pattern: re.Pattern[str]
    to_year: Callable[[re.Match[str]], str]
    to_date: Callable[[re.Match[str]], str]
    accept: Callable[[re.Match[str]], bool] = lambda match: True

    def match(self, name: str) -> Optional[re.Match[str]]:
        """Return the accepted match for ``name`` or ``None``."""
        found = self.pattern.search(name)
        if found is None or not self.accept(found):
            return None
        return found


DATE_RULES: tuple[DateRule, ...] = (
    # Minutes-03-10-24
    DateRule(
        name="mdy-suffix",
        pattern=re.compile(r"-(\d{1,2})-(\d{1,2})-(\d{2})$"),
        accept=lambda m: _valid_month_day(m.group(1), m.group(2)),
        to_year=lambda m: str(int(m.group(3)) + 2000),
        to_date=lambda m: f"{MONTHS[int(m.group(1))]} {int(m.group(2))}, {int(m.group(3)) + 2000}",
    ),
    # Newsletter_March_2023
    DateRule(
        name="month-name-year",
        pattern=re.compile(rf"[-_]({_MONTH_ALTERNATION})[-_](\d{{4}})", re.IGNORECASE),
        to_year=lambda m: m.group(2),
        to_date=lambda m: f"{m.group(1)} {m.group(2)}",
    ),
    # Budget-2021-Final
    DateRule(
        name="bare-year",
        pattern=re.compile(r"(?:^|[-_])(20\d{2})(?:[-_]|$)"),
        to_year=lambda m: m.group(1),
        to_date=lambda m: m.group(1),
    ),
    # 20190614_tank_inspection
    DateRule(
        name="ymd-prefix",
        pattern=re.compile(r"^(20\d{2})(\d{2})(\d{2})_"),
        accept=lambda m: _valid_month_day(m.group(2), m.group(3)),
        to_year=lambda m: m.group(1),
        to_date=lambda m: f"{MONTHS[int(m.group(2))]} {int(m.group(3))}, {m.group(1)}",
    ),
)


def match_rule(name: str) -> Optional[tuple[DateRule, re.Match[str]]]:
    """Return the first rule accepting the extension-less ``name`` with its match."""
    for rule in DATE_RULES:
        found = rule.match(name)
        if found is not None:
            return rule, found
    return None


def parse_document_year(filename: str, fallback_year: str) -> str:
    """Return the display year for ``filename``, falling back to the directory year."""
    winner = match_rule(strip_extension(filename))
    if winner is None:
        return fallback_year
    rule, found = winner
    return rule.to_year(found)


def parse_document_date(filename: str, fallback_month: str, fallback_year: str) -> str:
    """Return the display date for ``filename``.

    Unmatched names degrade to ``"<Month> <year>"`` from the directory segments;
    the month part is empty when ``fallback_month`` is not a valid 1-12 index.
    """
    winner = match_rule(strip_extension(filename))
    if winner is None:
        return f"{month_name(fallback_month)} {fallback_year}".strip()
    rule, found = winner
    return rule.to_date(found)


__all__ = [
    "MONTHS",
    "DATE_RULES",
    "DateRule",
    "match_rule",
    "month_name",
    "parse_document_date",
    "parse_document_year",
    "strip_extension",
]
