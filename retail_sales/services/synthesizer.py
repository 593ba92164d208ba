import logging
from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from ..core.config import SAMPLE_DAYS, SAMPLE_START
from ..models.schemas import SalesRecord
from ..utils.time_windows import round_half_up

logger = logging.getLogger(__name__)

BASE_LEVEL = 1000
SEASONAL_AMPLITUDE = 200
WEEKEND_BONUS = 300
DECEMBER_BONUS = 500
NOISE = 50
TREND_PER_DAY = 0.5


def generate_sample_data(
    days: int = SAMPLE_DAYS,
    start: date = SAMPLE_START,
    rng: Optional[np.random.Generator] = None,
) -> list[SalesRecord]:
    """Synthetic daily sales: annual cycle, weekend and December uplift, linear trend.

    Pass a seeded ``rng`` for repeatable output; without one every call differs.
    """
    rng = rng if rng is not None else np.random.default_rng()
    dates = pd.date_range(start, periods=days, freq="D")
    i = np.arange(days)

    sales = (
        BASE_LEVEL
        + SEASONAL_AMPLITUDE * np.sin(2 * np.pi * i / 365)
        + np.where(dates.weekday >= 5, WEEKEND_BONUS, 0)
        + np.where(dates.month == 12, DECEMBER_BONUS, 0)
        + rng.uniform(-NOISE, NOISE, size=days)
        + TREND_PER_DAY * i
    )

    records = [
        SalesRecord(date=d.date(), sales=round_half_up(s))
        for d, s in zip(dates, sales)
    ]
    logger.info(f"Generated {len(records)} synthetic sales records from {start}")
    return records
