from __future__ import annotations

from decimal import Decimal
from typing import Dict

from .models import InvoiceBreakdown

YEN = "¥"

_FIELDS = (
    "taxable_subtotal",
    "tax",
    "taxable_subtotal_with_tax",
    "non_taxable_total",
    "counseling_fee",
    "grand_total",
)


def format_currency(amount: int | float | Decimal) -> str:
    """``12345 -> '¥12,345'``. Yen has no minor unit; fractions are truncated."""
    value = int(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{YEN}{abs(value):,}"


def format_breakdown(breakdown: InvoiceBreakdown) -> Dict[str, str]:
    return {name: format_currency(getattr(breakdown, name)) for name in _FIELDS}
