from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional

from . import catalog
from .models import Alliance, SurchargeTag

ONE = Decimal("1")


def _as_tag(value: object) -> Optional[SurchargeTag]:
    try:
        return SurchargeTag(value)
    except ValueError:
        return None


def surcharge_multiplier(tags: Iterable[object], alliance: Alliance) -> Decimal:
    """Combine surcharge tags into a single multiplier.

    Overtime applies the flat overtime rate; each season tag applies the
    alliance's own rate. Tags compose multiplicatively, each at most once,
    and unrecognized tags leave the multiplier untouched.
    """
    multiplier = ONE
    for tag in {t for t in map(_as_tag, tags or ()) if t is not None}:
        if tag is SurchargeTag.OVERTIME:
            multiplier *= ONE + catalog.OVERTIME_RATE
        else:
            multiplier *= ONE + catalog.season_rate(alliance, tag)
    return multiplier


def allowed_tags(alliance: Alliance) -> List[SurchargeTag]:
    """Tags a form should offer for *alliance* (season tags with a zero rate are hidden)."""
    tags = [SurchargeTag.OVERTIME]
    tags.extend(t for t in catalog.SEASON_TAGS if catalog.season_rate(alliance, t) > 0)
    return tags
