from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from . import catalog
from .models import (
    AdHocOption,
    BookingDraft,
    BookingSnapshot,
    FixedNonTaxableOption,
    InvoiceLine,
    PlanLineItem,
    SurchargeTag,
)
from .surcharges import ONE, surcharge_multiplier

ZERO = Decimal("0")
MAX_ADDITIONAL_PETS = 3

# ---------------------------------------------------------------------------
# Line labels (match the receipt rows)
# ---------------------------------------------------------------------------
MULTI_PET = "Multi-pet"
EXTENSION = "15-min Extension (option)"
KEY_HANDLING = "Key Pickup & Return"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class IssueKind(str, Enum):
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    OUT_OF_RANGE_VALUE = "OutOfRangeValue"
    UNRECOGNIZED_ENUM_VALUE = "UnrecognizedEnumValue"


@dataclass(frozen=True)
class Issue:
    kind: IssueKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


_KNOWN_TAGS = {t.value for t in SurchargeTag}


def _check_options(
    errors: Dict[str, Issue], prefix: str, options: Sequence[AdHocOption]
) -> None:
    for i, opt in enumerate(options):
        if not opt.name:
            errors[f"{prefix}.{i}.name"] = Issue(
                IssueKind.MISSING_REQUIRED_FIELD, "Option name is required."
            )
        if opt.count < 0:
            errors[f"{prefix}.{i}.count"] = Issue(
                IssueKind.OUT_OF_RANGE_VALUE, "Count must be 0 or more."
            )
        if opt.unit_price < 0:
            errors[f"{prefix}.{i}.unit_price"] = Issue(
                IssueKind.OUT_OF_RANGE_VALUE, "Unit price must be 0 or more."
            )


def validate(draft: BookingDraft) -> Dict[str, Issue]:
    """Field-level checks run before pricing. Empty result means valid."""
    errors: Dict[str, Issue] = {}
    for key, label in (
        ("customer_name", "Customer name"),
        ("sitter_name", "Sitter name"),
        ("sitting_datetime", "Sitting date/time"),
    ):
        if not getattr(draft, key):
            errors[key] = Issue(IssueKind.MISSING_REQUIRED_FIELD, f"{label} is required.")

    for i, plan in enumerate(draft.plans):
        if not plan.name:
            errors[f"plans.{i}.name"] = Issue(
                IssueKind.MISSING_REQUIRED_FIELD, "Plan name is required."
            )
        if plan.count < 1:
            errors[f"plans.{i}.count"] = Issue(
                IssueKind.OUT_OF_RANGE_VALUE, "Count must be 1 or more."
            )
        unknown = [t for t in plan.surcharges if t not in _KNOWN_TAGS]
        if unknown:
            errors[f"plans.{i}.surcharges"] = Issue(
                IssueKind.UNRECOGNIZED_ENUM_VALUE,
                f"Unknown surcharge: {', '.join(unknown)}",
            )

    if not 0 <= draft.additional_pets <= MAX_ADDITIONAL_PETS:
        errors["additional_pets"] = Issue(
            IssueKind.OUT_OF_RANGE_VALUE,
            f"Additional pets must be between 0 and {MAX_ADDITIONAL_PETS}.",
        )
    for key in ("extension_count", "key_handling_count"):
        if getattr(draft, key) < 0:
            errors[key] = Issue(IssueKind.OUT_OF_RANGE_VALUE, "Count must be 0 or more.")

    for key in ("parking", "public_transport", "key_shipping"):
        slot = getattr(draft, key)
        if slot.count < 0 or slot.unit_price < 0:
            errors[key] = Issue(
                IssueKind.OUT_OF_RANGE_VALUE, "Unit price and count must be 0 or more."
            )

    _check_options(errors, "taxable_options", draft.taxable_options)
    _check_options(errors, "non_taxable_options", draft.non_taxable_options)
    return errors


# ---------------------------------------------------------------------------
# Pricing helpers
# ---------------------------------------------------------------------------
def money(value: object) -> Decimal:
    """Coerce a stored price/count to Decimal; anything unusable prices as 0."""
    if value is None:
        return ZERO
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return d if d.is_finite() else ZERO


def _add_line(
    lines: List[InvoiceLine],
    label: str,
    category: str,
    unit_price: object,
    count: int,
    multiplier: Decimal = ONE,
    *,
    taxable: bool = True,
) -> Decimal:
    amount = money(unit_price) * money(count) * multiplier
    if count <= 0 or amount == ZERO:
        return ZERO
    lines.append(InvoiceLine(
        label=label,
        category=category,
        unit_price=money(unit_price),
        count=count,
        multiplier=multiplier,
        amount=amount,
        taxable=taxable,
    ))
    return amount


def counted_plan_total(plans: Iterable[PlanLineItem]) -> int:
    """Plan occurrences that count toward the multi-pet fee (short extension excluded)."""
    return sum(p.count for p in plans if p.name != catalog.SHORT_EXTENSION)


def extension_multiplier(snapshot: BookingSnapshot) -> Decimal:
    """Surcharge applied to the extension option.

    The extension inherits the surcharges of the first booked plan; it has
    no tags of its own.
    """
    if snapshot.plans and snapshot.plans[0].surcharges:
        return surcharge_multiplier(snapshot.plans[0].surcharges, snapshot.alliance)
    return ONE


# ---------------------------------------------------------------------------
# Per-category pricing
# ---------------------------------------------------------------------------
def price_plans(snapshot: BookingSnapshot, lines: List[InvoiceLine]) -> Decimal:
    total = ZERO
    for plan in snapshot.plans:
        mult = surcharge_multiplier(plan.surcharges, snapshot.alliance)
        total += _add_line(lines, plan.name, "plan", plan.unit_price, plan.count, mult)
    return total


def price_multi_pet(snapshot: BookingSnapshot, lines: List[InvoiceLine]) -> Decimal:
    plan_count = counted_plan_total(snapshot.plans)
    if plan_count <= 0:
        return ZERO
    fee = catalog.additional_pet_fee(snapshot.fee_schedule, snapshot.alliance)
    return _add_line(
        lines, MULTI_PET, "multi_pet", fee, snapshot.additional_pets * plan_count
    )


def price_extension(snapshot: BookingSnapshot, lines: List[InvoiceLine]) -> Decimal:
    fee = catalog.extension_fee(snapshot.fee_schedule, snapshot.alliance)
    return _add_line(
        lines, EXTENSION, "extension", fee, snapshot.extension_count,
        extension_multiplier(snapshot),
    )


def price_key_handling(snapshot: BookingSnapshot, lines: List[InvoiceLine]) -> Decimal:
    fee = catalog.key_handling_fee(snapshot.fee_schedule, snapshot.alliance)
    return _add_line(lines, KEY_HANDLING, "key_handling", fee, snapshot.key_handling_count)


def price_options(
    options: Sequence[AdHocOption], lines: List[InvoiceLine], *, taxable: bool
) -> Decimal:
    category = "taxable_option" if taxable else "non_taxable_option"
    return sum(
        (_add_line(lines, o.name, category, o.unit_price, o.count, taxable=taxable)
         for o in options),
        ZERO,
    )


def price_fixed_slots(
    slots: Sequence[FixedNonTaxableOption], lines: List[InvoiceLine]
) -> Decimal:
    return sum(
        (_add_line(lines, s.name, "fixed_non_taxable", s.unit_price, s.count, taxable=False)
         for s in slots),
        ZERO,
    )


def taxable_subtotal(snapshot: BookingSnapshot, lines: List[InvoiceLine]) -> Decimal:
    """Raw (unfloored) taxable subtotal. Counseling is not part of it."""
    return (
        price_plans(snapshot, lines)
        + price_multi_pet(snapshot, lines)
        + price_extension(snapshot, lines)
        + price_key_handling(snapshot, lines)
        + price_options(snapshot.taxable_options, lines, taxable=True)
    )


def non_taxable_total(snapshot: BookingSnapshot, lines: List[InvoiceLine]) -> Decimal:
    return (
        price_fixed_slots(snapshot.fixed_non_taxable, lines)
        + price_options(snapshot.non_taxable_options, lines, taxable=False)
    )
