"""Spreadsheet-compatible rounding"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext


def excel_round(value: float, digits: int = 0) -> float:
    """
    Round the way a spreadsheet ROUND() does.

    The value is first reduced to 15 significant digits (the precision a
    spreadsheet stores and displays), then rounded half away from zero.
    ``1.005`` therefore rounds to ``1.01`` and ``-2.5`` to ``-3``, where the
    built-in ``round`` gives ``1.0`` and ``-2``.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded float; non-finite input returns 0.0
    """
    if value is None or not math.isfinite(value):
        return 0.0

    exact = Decimal(format(value, ".15g"))
    with localcontext() as ctx:
        # Room for every integer digit plus the kept decimals
        ctx.prec = max(28, exact.adjusted() + digits + 2)
        rounded = exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    # + 0.0 turns -0.0 into 0.0
    return float(rounded) + 0.0
