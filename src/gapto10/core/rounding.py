from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from gapto10.core.models import Config, RoundingType


def round_half_up(value: float) -> float:
    number = Decimal(str(value))
    with localcontext() as ctx:
        # enough digits to hold the integral part of any finite float
        ctx.prec = max(ctx.prec, number.adjusted() + 2)
        return float(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_rounding(value: float, mode: RoundingType | str = RoundingType.STANDARD) -> float:
    mode = RoundingType(mode)
    if not math.isfinite(value):
        return float(value)
    if mode is RoundingType.FLOOR:
        return float(math.floor(value))
    if mode is RoundingType.CEIL:
        return float(math.ceil(value))
    return round_half_up(value)


def percentage_to_points(
    percentage: float,
    percentage_per_point: float,
    mode: RoundingType | str = RoundingType.STANDARD,
) -> float:
    # percentage_per_point > 0 is a precondition, enforced by validate_config
    return apply_rounding(percentage / percentage_per_point, mode)


def total_points(config: Config) -> float:
    return 100 / config.percentage_per_point
