"""Lenient numeric parsing for form values"""

import math
import re
from typing import Any, Optional, Tuple

CURRENCY_SYMBOLS = "$€£¥"
STRIP_PATTERN = re.compile(rf"[\s,{re.escape(CURRENCY_SYMBOLS)}]")
ACCOUNTING_NEGATIVE = re.compile(r"^\((.*)\)$")


def parse_number(raw: Any) -> Tuple[Optional[float], bool]:
    """
    Parse a raw form value into a number

    Accepts ints, floats and strings such as ``"1,200"``, ``"$18,000.50"``,
    ``"10%"`` or ``"(250)"``. Booleans, blanks and non-finite values are not
    numbers.

    Args:
        raw: Value as typed or persisted

    Returns:
        ``(value, had_percent_suffix)``; value is None when unparsable
    """
    if raw is None or isinstance(raw, bool):
        return None, False

    if isinstance(raw, (int, float)):
        value = float(raw)
        return (value if math.isfinite(value) else None), False

    if not isinstance(raw, str):
        return None, False

    text = raw.strip()
    if not text:
        return None, False

    negative = False
    match = ACCOUNTING_NEGATIVE.match(text)
    if match:
        negative = True
        text = match.group(1).strip()

    percent = text.endswith("%")
    if percent:
        text = text[:-1]

    text = STRIP_PATTERN.sub("", text)
    if not text:
        return None, False

    try:
        value = float(text)
    except ValueError:
        return None, False

    if not math.isfinite(value):
        return None, False

    return (-value if negative else value), percent


def is_blank(raw: Any) -> bool:
    """True for values a spreadsheet would show as an empty cell"""
    return raw is None or (isinstance(raw, str) and not raw.strip())
