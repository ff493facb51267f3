"""Sequential invoice numbering (INV-00001, INV-00002, ...)"""

from typing import Iterable, Optional

PREFIX = "INV-"


def format_invoice_number(sequence: int) -> str:
    return f"{PREFIX}{sequence:05d}"


def next_invoice_number(existing_numbers: Iterable[Optional[str]]) -> str:
    """Highest numeric suffix among existing invoice numbers plus one"""
    highest = 0
    for number in existing_numbers:
        suffix = (number or "")[len(PREFIX):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return format_invoice_number(highest + 1)
