from __future__ import annotations

import logging
from decimal import ROUND_FLOOR, Decimal
from typing import List

from . import catalog, rules
from .models import BookingSnapshot, CounselingTier, InvoiceBreakdown, InvoiceLine

log = logging.getLogger("SitterQuote.domain.invoice")


def floor_yen(amount: Decimal) -> int:
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def compute_tax(amount: Decimal) -> int:
    """Consumption tax on a taxable amount, fractions of a yen dropped."""
    return floor_yen(amount * catalog.TAX_RATE)


def apply_cancellation(amount: Decimal | int, factor: Decimal) -> int:
    return floor_yen(Decimal(amount) * factor)


def resolve_counseling_fee(snapshot: BookingSnapshot) -> int:
    if snapshot.counseling == CounselingTier.NONE:
        return 0
    return catalog.counseling_fee(snapshot.fee_schedule, snapshot.alliance, snapshot.counseling)


def compute_invoice(snapshot: BookingSnapshot) -> InvoiceBreakdown:
    """Price a resolved booking in a single pass.

    The cancellation factor is applied to taxable subtotal, tax, non-taxable
    total and counseling fee separately, each floored on its own, so the
    adjusted parts need not sum to the floor of the adjusted whole.
    """
    lines: List[InvoiceLine] = []

    taxable = rules.taxable_subtotal(snapshot, lines)
    counseling = resolve_counseling_fee(snapshot)
    tax = compute_tax(taxable)
    non_taxable = rules.non_taxable_total(snapshot, lines)

    factor = catalog.cancellation_factor(snapshot.cancellation_tier)
    adj_taxable = apply_cancellation(taxable, factor)
    adj_tax = apply_cancellation(tax, factor)
    adj_non_taxable = apply_cancellation(non_taxable, factor)
    adj_counseling = apply_cancellation(counseling, factor)

    grand_total = adj_taxable + adj_tax + adj_non_taxable + adj_counseling

    log.debug(
        "invoice schedule=%s alliance=%s tier=%s taxable=%s tax=%d non_taxable=%s "
        "counseling=%d factor=%s grand_total=%d lines=%d",
        snapshot.fee_schedule.value, snapshot.alliance.value,
        snapshot.cancellation_tier.value, taxable, tax, non_taxable,
        counseling, factor, grand_total, len(lines),
    )

    return InvoiceBreakdown(
        taxable_subtotal=adj_taxable,
        tax=adj_tax,
        taxable_subtotal_with_tax=adj_taxable + adj_tax,
        non_taxable_total=adj_non_taxable,
        counseling_fee=adj_counseling,
        grand_total=grand_total,
        cancellation_factor=factor,
        lines=lines,
    )
