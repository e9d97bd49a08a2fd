"""Convert decimal feet to architectural dimension strings."""

from __future__ import annotations

import math


def format_dimension(decimal_feet: float) -> str:
    """Return *decimal_feet* as feet-inches rounded to the nearest half inch.

    >>> format_dimension(65.7083)
    '65\\'-8 1/2"'
    >>> format_dimension(12.0)
    '12\\'-0"'
    """
    feet = math.floor(decimal_feet)
    total_inches = (decimal_feet - feet) * 12.0
    inches = math.floor(total_inches)
    remainder = total_inches - inches

    fraction = ""
    if 0.25 <= remainder < 0.75:
        fraction = " 1/2"
    elif remainder >= 0.75:
        inches += 1

    if inches >= 12:
        feet += 1
        inches -= 12

    return f"{feet}'-{inches}{fraction}\""
