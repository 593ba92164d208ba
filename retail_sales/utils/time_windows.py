import math
from datetime import date, timedelta


def future_dates(last_actual: date, days: int) -> list[date]:
    """The `days` calendar days immediately after `last_actual`."""
    return [last_actual + timedelta(days=d) for d in range(1, days + 1)]


def round_half_up(x: float) -> int:
    # round() is banker's rounding; the dashboard has always rounded .5 up
    return int(math.floor(x + 0.5))
