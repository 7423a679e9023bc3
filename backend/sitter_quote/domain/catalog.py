"""Versioned rate catalog.

Every price the engine needs is looked up here, keyed by
(FeeSchedule, Alliance). Lookups never raise: a key the catalog does not
list resolves to 0 so a form holding a retired plan name still prices.
Adding a fee schedule means adding rows to ``CATALOG``, nothing else.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from .models import Alliance, CancellationTier, CounselingTier, FeeSchedule, SurchargeTag

# ---------------------------------------------------------------------------
# Canonical plan labels
# ---------------------------------------------------------------------------
DOG_BASIC = "Dog Basic"
DOG_CARE = "Dog Care"
DOG_WALK = "Dog Walk"
CAT_BASIC = "Cat Basic"
SMALL_ANIMAL_BASIC = "Small Animal Basic"
SHORT_EXTENSION = "15-min Extension"

TAX_RATE = Decimal("0.10")
OVERTIME_RATE = Decimal("0.20")

CANCELLATION_FACTORS: Mapping[CancellationTier, Decimal] = MappingProxyType({
    CancellationTier.NORMAL: Decimal("1"),
    CancellationTier.CANCEL_50: Decimal("0.5"),
    CancellationTier.CANCEL_100: Decimal("1"),  # full amount is billed
})

SEASON_TAGS = (SurchargeTag.SEASON_LOW, SurchargeTag.SEASON_MID, SurchargeTag.SEASON_HIGH)


def _frozen(d: Dict) -> Mapping:
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class RateTable:
    """Unit prices (yen) for one fee schedule and alliance."""
    plans: Mapping[str, int]
    additional_pet_fee: int
    key_handling_fee: int
    extension_fee: int
    transportation_fee: int
    counseling_fees: Mapping[CounselingTier, int] = field(
        default_factory=lambda: _frozen({})
    )


EMPTY_TABLE = RateTable(
    plans=_frozen({}),
    additional_pet_fee=0,
    key_handling_fee=0,
    extension_fee=0,
    transportation_fee=0,
)

_OLD_PLANS = _frozen({
    DOG_BASIC: 4200,
    DOG_CARE: 3600,
    DOG_WALK: 3200,
    CAT_BASIC: 3600,
    SMALL_ANIMAL_BASIC: 3600,
    SHORT_EXTENSION: 600,
})

_NEW_PLANS = _frozen({
    DOG_BASIC: 5400,
    DOG_CARE: 4600,
    DOG_WALK: 4100,
    CAT_BASIC: 4600,
    SMALL_ANIMAL_BASIC: 4600,
    SHORT_EXTENSION: 600,
})

_COUNSELING = _frozen({
    CounselingTier.FREE: 1100,
    CounselingTier.PAID: 2200,
    CounselingTier.NONE: 0,
})


def _table(plans: Mapping[str, int], transportation_fee: int) -> RateTable:
    return RateTable(
        plans=plans,
        additional_pet_fee=800,
        key_handling_fee=1000,
        extension_fee=600,
        transportation_fee=transportation_fee,
        counseling_fees=_COUNSELING,
    )


CATALOG: Mapping[Tuple[FeeSchedule, Alliance], RateTable] = MappingProxyType({
    (FeeSchedule.OLD, Alliance.SEWAKURU): _table(_OLD_PLANS, 600),
    (FeeSchedule.OLD, Alliance.TOKYU): _table(_OLD_PLANS, 600),
    (FeeSchedule.NEW, Alliance.SEWAKURU): _table(_NEW_PLANS, 800),
    (FeeSchedule.NEW, Alliance.TOKYU): _table(_NEW_PLANS, 1000),
})

# Season surcharge per alliance. A zero rate means the alliance does not
# offer that season tag. season_low stays at 20% for every alliance because
# the legacy flat "シーズン" surcharge maps onto it.
SEASON_RATES: Mapping[Alliance, Mapping[SurchargeTag, Decimal]] = MappingProxyType({
    Alliance.SEWAKURU: _frozen({
        SurchargeTag.SEASON_LOW: Decimal("0.20"),
        SurchargeTag.SEASON_MID: Decimal("0"),
        SurchargeTag.SEASON_HIGH: Decimal("0"),
    }),
    Alliance.TOKYU: _frozen({
        SurchargeTag.SEASON_LOW: Decimal("0.20"),
        SurchargeTag.SEASON_MID: Decimal("0.25"),
        SurchargeTag.SEASON_HIGH: Decimal("0.30"),
    }),
})


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
def rate_table(schedule: FeeSchedule, alliance: Alliance) -> RateTable:
    return CATALOG.get((schedule, alliance), EMPTY_TABLE)


def plan_names(schedule: FeeSchedule, alliance: Alliance) -> Tuple[str, ...]:
    return tuple(rate_table(schedule, alliance).plans)


def plan_price(schedule: FeeSchedule, alliance: Alliance, name: str) -> int:
    return rate_table(schedule, alliance).plans.get(name, 0)


def additional_pet_fee(schedule: FeeSchedule, alliance: Alliance) -> int:
    return rate_table(schedule, alliance).additional_pet_fee


def key_handling_fee(schedule: FeeSchedule, alliance: Alliance) -> int:
    return rate_table(schedule, alliance).key_handling_fee


def extension_fee(schedule: FeeSchedule, alliance: Alliance) -> int:
    return rate_table(schedule, alliance).extension_fee


def transportation_fee(schedule: FeeSchedule, alliance: Alliance) -> int:
    return rate_table(schedule, alliance).transportation_fee


def counseling_fee(schedule: FeeSchedule, alliance: Alliance, tier: CounselingTier) -> int:
    return rate_table(schedule, alliance).counseling_fees.get(tier, 0)


def season_rate(alliance: Alliance, tag: SurchargeTag) -> Decimal:
    return SEASON_RATES.get(alliance, _frozen({})).get(tag, Decimal("0"))


def cancellation_factor(tier: CancellationTier) -> Decimal:
    return CANCELLATION_FACTORS.get(tier, Decimal("1"))
