# backend/sitter_quote/domain/models.py
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator


# ---------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------
class FeeSchedule(str, Enum):
    OLD = "old"
    NEW = "new"  # 2025-07 revision


class Alliance(str, Enum):
    SEWAKURU = "sewakuru"
    TOKYU = "tokyu"


class CancellationTier(str, Enum):
    NORMAL = "normal"
    CANCEL_50 = "cancel_50"
    CANCEL_100 = "cancel_100"


class CounselingTier(str, Enum):
    FREE = "free"
    PAID = "paid"
    NONE = "none"


class SurchargeTag(str, Enum):
    OVERTIME = "overtime"
    SEASON_LOW = "season_low"
    SEASON_MID = "season_mid"
    SEASON_HIGH = "season_high"


class FixedSlot(str, Enum):
    TRANSPORTATION = "transportation"
    PARKING = "parking"
    PUBLIC_TRANSPORT = "public_transport"
    KEY_SHIPPING = "key_shipping"


# Labels written by the original Japanese form. Stored drafts still carry
# them, so every enum field accepts them as aliases.
LEGACY_LABELS: Dict[str, str] = {
    "旧料金": FeeSchedule.OLD.value,
    "新料金": FeeSchedule.NEW.value,
    "セワクル": Alliance.SEWAKURU.value,
    "東急": Alliance.TOKYU.value,
    "通常": CancellationTier.NORMAL.value,
    "キャンセル50%": CancellationTier.CANCEL_50.value,
    "キャンセル100%": CancellationTier.CANCEL_100.value,
    "無料": CounselingTier.FREE.value,
    "有料": CounselingTier.PAID.value,
    "なし": CounselingTier.NONE.value,
    "時間外": SurchargeTag.OVERTIME.value,
    "シーズン": SurchargeTag.SEASON_LOW.value,
}

FIXED_SLOT_LABELS: Dict[FixedSlot, str] = {
    FixedSlot.TRANSPORTATION: "Transportation",
    FixedSlot.PARKING: "Parking",
    FixedSlot.PUBLIC_TRANSPORT: "Public Transport",
    FixedSlot.KEY_SHIPPING: "Key Shipping",
}


def normalize_label(value: object) -> object:
    """Trim/lower-case a raw enum value and map legacy labels onto it."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        cleaned = value.strip()
        return LEGACY_LABELS.get(cleaned, cleaned.lower())
    return value


def _normalize_tags(value: object) -> object:
    # Deduplicated, order-preserving. Unknown tags are kept as-is; the
    # compositor ignores them and the validator reports them. Non-string
    # tags are stringified so they reach the validator too.
    if value is None:
        return ()
    if isinstance(value, (str, Enum)):
        value = [value]
    if isinstance(value, (list, tuple, set, frozenset)):
        out: List[str] = []
        for tag in value:
            if tag is None:
                continue
            norm = normalize_label(tag)
            if not isinstance(norm, str):
                norm = str(norm)
            if norm and norm not in out:
                out.append(norm)
        return tuple(out)
    return value


# ---------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------
class Settings(BaseModel):
    """
    Persisted form defaults.
    - DEFAULT_FEE_SCHEDULE / DEFAULT_ALLIANCE / DEFAULT_COUNSELING: used when
      a draft omits the field
    - LOG_LEVEL: level of the Flask app logger
    """
    DEFAULT_FEE_SCHEDULE: FeeSchedule = FeeSchedule.OLD
    DEFAULT_ALLIANCE: Alliance = Alliance.SEWAKURU
    DEFAULT_COUNSELING: CounselingTier = CounselingTier.FREE
    LOG_LEVEL: Literal["debug", "info", "warning", "error"] = "info"

    @field_validator(
        "DEFAULT_FEE_SCHEDULE", "DEFAULT_ALLIANCE", "DEFAULT_COUNSELING", mode="before"
    )
    @classmethod
    def _normalize_enum(cls, value: object) -> object:
        return normalize_label(value)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_level(cls, value: Optional[str]) -> str:
        if value is None:
            return "info"
        if isinstance(value, str):
            cleaned = value.strip().lower()
            if not cleaned:
                return "info"
            if cleaned == "warn":
                return "warning"
            return cleaned
        return value  # type: ignore[return-value]


# ---------------------------------------------------------------------
# Booking inputs
# ---------------------------------------------------------------------
class AdHocOption(BaseModel):
    """A free-form priced option, taxable or not depending on its list."""
    name: str = ""
    unit_price: float = 0
    count: int = 1

    @field_validator("name", mode="before")
    @classmethod
    def _trim(cls, value: Optional[str]) -> str:
        return value.strip() if isinstance(value, str) else (value or "")


class SlotEntry(BaseModel):
    """User-entered price/count of a fixed non-taxable slot."""
    unit_price: float = 0
    count: int = 0


class PlanChoice(BaseModel):
    """A plan as the user picked it: no unit price, that comes from the catalog."""
    name: str = ""
    count: int = 1
    surcharges: Tuple[str, ...] = ()

    @field_validator("name", mode="before")
    @classmethod
    def _trim(cls, value: Optional[str]) -> str:
        return value.strip() if isinstance(value, str) else (value or "")

    @field_validator("surcharges", mode="before")
    @classmethod
    def _tags(cls, value: object) -> object:
        return _normalize_tags(value)


class PlanLineItem(PlanChoice):
    unit_price: float = 0


class FixedNonTaxableOption(BaseModel):
    slot: FixedSlot
    name: str = ""
    unit_price: float = 0
    count: int = 0

    @model_validator(mode="after")
    def _default_name(self) -> "FixedNonTaxableOption":
        if not self.name:
            self.name = FIXED_SLOT_LABELS[self.slot]
        return self


class _BookingBase(BaseModel):
    fee_schedule: FeeSchedule = FeeSchedule.OLD
    alliance: Alliance = Alliance.SEWAKURU
    cancellation_tier: CancellationTier = CancellationTier.NORMAL
    counseling: CounselingTier = CounselingTier.FREE

    additional_pets: int = 0
    extension_count: int = 0
    key_handling_count: int = 0
    taxable_options: List[AdHocOption] = Field(default_factory=list)
    non_taxable_options: List[AdHocOption] = Field(default_factory=list)

    @field_validator(
        "fee_schedule", "alliance", "cancellation_tier", "counseling", mode="before"
    )
    @classmethod
    def _normalize_enum(cls, value: object) -> object:
        return normalize_label(value)


class BookingDraft(_BookingBase):
    """
    Raw choices captured by the estimate form.
    Derived money fields (plan unit prices, transportation) are not stored
    here; ``booking.derive_snapshot`` resolves them from the rate catalog.
    """
    customer_name: str = ""
    sitter_name: str = ""
    sitting_datetime: str = ""

    plans: List[PlanChoice] = Field(default_factory=list)
    parking: SlotEntry = Field(default_factory=SlotEntry)
    public_transport: SlotEntry = Field(default_factory=SlotEntry)
    key_shipping: SlotEntry = Field(default_factory=SlotEntry)

    @field_validator("customer_name", "sitter_name", "sitting_datetime", mode="before")
    @classmethod
    def _trim(cls, value: Optional[str]) -> str:
        return value.strip() if isinstance(value, str) else (value or "")


class BookingSnapshot(_BookingBase):
    """Fully resolved engine input."""
    plans: List[PlanLineItem] = Field(default_factory=list)
    fixed_non_taxable: List[FixedNonTaxableOption] = Field(default_factory=list)


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------
class InvoiceLine(BaseModel):
    label: str
    category: Literal[
        "plan", "multi_pet", "extension", "key_handling", "taxable_option",
        "fixed_non_taxable", "non_taxable_option",
    ]
    unit_price: Decimal
    count: int
    multiplier: Decimal = Decimal("1")
    amount: Decimal
    taxable: bool = True


class InvoiceBreakdown(BaseModel):
    taxable_subtotal: int
    tax: int
    taxable_subtotal_with_tax: int
    non_taxable_total: int
    counseling_fee: int
    grand_total: int
    cancellation_factor: Decimal = Decimal("1")
    lines: List[InvoiceLine] = Field(default_factory=list)
