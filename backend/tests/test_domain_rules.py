from __future__ import annotations

from decimal import Decimal

from conftest import draft_payload, make_snapshot, plan

from sitter_quote.domain import rules
from sitter_quote.domain.models import (
    AdHocOption,
    Alliance,
    BookingDraft,
    FixedNonTaxableOption,
    FixedSlot,
    FeeSchedule,
)


def _taxable(snapshot):
    lines = []
    return rules.taxable_subtotal(snapshot, lines), lines


# ---------------------------------------------------------------------------
# Pricer
# ---------------------------------------------------------------------------


def test_plans_apply_their_own_surcharges():
    snap = make_snapshot(plans=[
        plan("Dog Basic", 4200, 2, "overtime"),
        plan("Cat Basic", 3600, 1),
    ])
    total, lines = _taxable(snap)
    assert total == Decimal("10080") + Decimal("3600")
    assert [l.label for l in lines] == ["Dog Basic", "Cat Basic"]
    assert lines[0].multiplier == Decimal("1.2")


def test_zero_unit_price_contributes_nothing():
    snap = make_snapshot(plans=[plan("Retired Plan", 0, 3, "overtime")])
    total, lines = _taxable(snap)
    assert total == 0
    assert lines == []


def test_money_coerces_unusable_values_to_zero():
    assert rules.money(None) == 0
    assert rules.money(float("nan")) == 0
    assert rules.money("abc") == 0
    assert rules.money(4200.0) == Decimal("4200")


def test_multi_pet_fee_counts_plans():
    snap = make_snapshot(additional_pets=2, plans=[plan("Dog Basic", 4200, 2)])
    lines = []
    assert rules.price_multi_pet(snap, lines) == Decimal("3200")
    assert lines[0].count == 4


def test_multi_pet_excludes_short_extension_plan():
    snap = make_snapshot(additional_pets=1, plans=[
        plan("Dog Basic", 4200, 1),
        plan("15-min Extension", 600, 3),
    ])
    assert rules.counted_plan_total(snap.plans) == 1
    assert rules.price_multi_pet(snap, []) == Decimal("800")


def test_multi_pet_guard_without_counted_plans():
    # per-pet fee is 800 here, so a zero result comes from the guard
    snap = make_snapshot(additional_pets=3, plans=[plan("15-min Extension", 600, 2)])
    assert rules.price_multi_pet(snap, []) == 0
    snap = make_snapshot(additional_pets=3, plans=[])
    assert rules.price_multi_pet(snap, []) == 0


def test_extension_inherits_first_plan_surcharges():
    snap = make_snapshot(extension_count=2, plans=[
        plan("Dog Basic", 4200, 1, "overtime", "season_low"),
        plan("Cat Basic", 3600, 1),
    ])
    assert rules.extension_multiplier(snap) == Decimal("1.44")
    assert rules.price_extension(snap, []) == Decimal("1728")


def test_extension_ignores_surcharges_of_later_plans():
    snap = make_snapshot(extension_count=1, plans=[
        plan("Cat Basic", 3600, 1),
        plan("Dog Basic", 4200, 1, "overtime"),
    ])
    assert rules.extension_multiplier(snap) == 1
    assert rules.price_extension(snap, []) == Decimal("600")

    no_plans = make_snapshot(extension_count=1)
    assert rules.price_extension(no_plans, []) == Decimal("600")


def test_key_handling_and_taxable_options():
    snap = make_snapshot(
        key_handling_count=2,
        taxable_options=[
            AdHocOption(name="Medication", unit_price=500, count=2),
            AdHocOption(name="Unused", unit_price=900, count=0),
        ],
    )
    total, lines = _taxable(snap)
    assert total == Decimal("2000") + Decimal("1000")
    assert {l.category for l in lines} == {"key_handling", "taxable_option"}


def test_non_taxable_total_sums_slots_and_options():
    snap = make_snapshot(
        fixed_non_taxable=[
            FixedNonTaxableOption(slot=FixedSlot.TRANSPORTATION, unit_price=600, count=2),
            FixedNonTaxableOption(slot=FixedSlot.PARKING, unit_price=300, count=1),
            FixedNonTaxableOption(slot=FixedSlot.PUBLIC_TRANSPORT),
            FixedNonTaxableOption(slot=FixedSlot.KEY_SHIPPING),
        ],
        non_taxable_options=[AdHocOption(name="Toll", unit_price=250, count=2)],
    )
    lines = []
    assert rules.non_taxable_total(snap, lines) == Decimal("2000")
    assert all(not l.taxable for l in lines)
    assert [l.label for l in lines] == ["Transportation", "Parking", "Toll"]


def test_schedule_drives_catalog_fees():
    snap = make_snapshot(fee_schedule=FeeSchedule.NEW, alliance=Alliance.TOKYU, key_handling_count=1)
    assert rules.price_key_handling(snap, []) == Decimal("1000")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_validate_accepts_complete_draft():
    assert rules.validate(BookingDraft(**draft_payload())) == {}


def test_validate_reports_missing_fields():
    draft = BookingDraft(**draft_payload(
        customer_name=" ",
        sitter_name="",
        plans=[{"name": "", "count": 1}],
        taxable_options=[{"name": "", "unit_price": 100, "count": 1}],
    ))
    errors = rules.validate(draft)
    for key in ("customer_name", "sitter_name", "plans.0.name", "taxable_options.0.name"):
        assert errors[key].kind is rules.IssueKind.MISSING_REQUIRED_FIELD
    assert "sitting_datetime" not in errors


def test_validate_reports_out_of_range_values():
    draft = BookingDraft(**draft_payload(
        plans=[{"name": "Dog Basic", "count": 0}],
        additional_pets=4,
        extension_count=-1,
        parking={"unit_price": -100, "count": 1},
        non_taxable_options=[{"name": "Toll", "unit_price": -1, "count": -2}],
    ))
    errors = rules.validate(draft)
    for key in (
        "plans.0.count", "additional_pets", "extension_count", "parking",
        "non_taxable_options.0.count", "non_taxable_options.0.unit_price",
    ):
        assert errors[key].kind is rules.IssueKind.OUT_OF_RANGE_VALUE
    assert "key_handling_count" not in errors


def test_validate_reports_unknown_surcharge():
    draft = BookingDraft(**draft_payload(
        plans=[{"name": "Dog Basic", "count": 1, "surcharges": ["overtime", "holiday"]}],
    ))
    issue = rules.validate(draft)["plans.0.surcharges"]
    assert issue.kind is rules.IssueKind.UNRECOGNIZED_ENUM_VALUE
    assert "holiday" in issue.message
    assert issue.to_dict()["kind"] == "UnrecognizedEnumValue"


def test_validate_reports_non_string_surcharges():
    draft = BookingDraft(**draft_payload(
        plans=[{"name": "Dog Basic", "count": 1, "surcharges": [5, True, {"x": 1}, None]}],
    ))
    assert draft.plans[0].surcharges == ("5", "True", "{'x': 1}")
    issue = rules.validate(draft)["plans.0.surcharges"]
    assert issue.kind is rules.IssueKind.UNRECOGNIZED_ENUM_VALUE
    assert "5" in issue.message
