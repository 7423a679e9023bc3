from __future__ import annotations

from typing import List

from . import catalog
from .invoice import compute_invoice
from .models import (
    BookingDraft,
    BookingSnapshot,
    FixedNonTaxableOption,
    FixedSlot,
    InvoiceBreakdown,
    PlanLineItem,
)


def derive_snapshot(draft: BookingDraft) -> BookingSnapshot:
    """Resolve a draft's derived money fields from the rate catalog.

    Plan unit prices and the transportation slot are never taken from the
    client: they are looked up for the draft's current schedule and alliance,
    and transportation is billed once per plan occurrence.
    """
    schedule, alliance = draft.fee_schedule, draft.alliance

    plans: List[PlanLineItem] = [
        PlanLineItem(
            name=p.name,
            count=p.count,
            surcharges=p.surcharges,
            unit_price=catalog.plan_price(schedule, alliance, p.name),
        )
        for p in draft.plans
    ]

    fixed = [
        FixedNonTaxableOption(
            slot=FixedSlot.TRANSPORTATION,
            unit_price=catalog.transportation_fee(schedule, alliance),
            count=sum(p.count for p in plans),
        ),
        FixedNonTaxableOption(
            slot=FixedSlot.PARKING,
            unit_price=draft.parking.unit_price,
            count=draft.parking.count,
        ),
        FixedNonTaxableOption(
            slot=FixedSlot.PUBLIC_TRANSPORT,
            unit_price=draft.public_transport.unit_price,
            count=draft.public_transport.count,
        ),
        FixedNonTaxableOption(
            slot=FixedSlot.KEY_SHIPPING,
            unit_price=draft.key_shipping.unit_price,
            count=draft.key_shipping.count,
        ),
    ]

    return BookingSnapshot(
        fee_schedule=schedule,
        alliance=alliance,
        cancellation_tier=draft.cancellation_tier,
        counseling=draft.counseling,
        plans=plans,
        additional_pets=draft.additional_pets,
        extension_count=draft.extension_count,
        key_handling_count=draft.key_handling_count,
        taxable_options=[o.model_copy() for o in draft.taxable_options],
        fixed_non_taxable=fixed,
        non_taxable_options=[o.model_copy() for o in draft.non_taxable_options],
    )


def estimate(draft: BookingDraft) -> InvoiceBreakdown:
    return compute_invoice(derive_snapshot(draft))
