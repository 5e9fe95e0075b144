"""
US-style date text (MM/DD/YYYY) <-> datetime.date.
"""

from __future__ import annotations

from datetime import date


class InvalidDateError(ValueError):
    """Raised when text is not a real MM/DD/YYYY calendar date."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid date {text!r}: expected MM/DD/YYYY")


def parse_date_us(text: str) -> date:
    """Parse ``MM/DD/YYYY``. Rejects impossible dates such as 02/30/2021."""
    parts = text.strip().split("/")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise InvalidDateError(text)
    month, day, year = (int(part) for part in parts)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(text) from exc


def format_date_us(value: date) -> str:
    return value.strftime("%m/%d/%Y")
