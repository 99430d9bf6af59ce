"""Half-up rounding for reported metrics.

Python's ``round`` sends exact ties to the even digit (2500.5 -> 2500), which
can move a value across a band edge. Reported figures round ties upward.
"""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals, ties toward +inf (2500.5 -> 2501, 0.125 -> 0.13)."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale
