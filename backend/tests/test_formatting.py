from __future__ import annotations

from decimal import Decimal

from sitter_quote.domain.formatting import format_breakdown, format_currency
from sitter_quote.domain.models import InvoiceBreakdown


def test_format_currency_groups_thousands():
    assert format_currency(0) == "¥0"
    assert format_currency(840) == "¥840"
    assert format_currency(9240) == "¥9,240"
    assert format_currency(1234567) == "¥1,234,567"
    assert format_currency(Decimal("1008")) == "¥1,008"
    assert format_currency(-1500) == "-¥1,500"


def test_format_breakdown_covers_every_total():
    inv = InvoiceBreakdown(
        taxable_subtotal=8400,
        tax=840,
        taxable_subtotal_with_tax=9240,
        non_taxable_total=1200,
        counseling_fee=0,
        grand_total=10440,
    )
    assert format_breakdown(inv) == {
        "taxable_subtotal": "¥8,400",
        "tax": "¥840",
        "taxable_subtotal_with_tax": "¥9,240",
        "non_taxable_total": "¥1,200",
        "counseling_fee": "¥0",
        "grand_total": "¥10,440",
    }
