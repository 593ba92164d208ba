import logging
import math
from typing import Optional, Sequence

import numpy as np

from ..core.config import (
    FALLBACK_FEATURE_IMPORTANCE,
    FALLBACK_MODELS,
    FORECAST_DAYS,
    HOLDOUT_FRACTION,
)
from ..models.schemas import (
    AnalysisResult,
    FeatureImportance,
    ForecastRecord,
    ModelMetrics,
    PredictionRecord,
    SalesRecord,
)
from ..utils.time_windows import future_dates, round_half_up

logger = logging.getLogger(__name__)

HOLDOUT_NOISE = 50
FORECAST_NOISE = 100


def run_fallback(
    records: Sequence[SalesRecord],
    rng: Optional[np.random.Generator] = None,
) -> AnalysisResult:
    """Local stand-in for the forecasting service.

    Nothing here is learned: held-out predictions are the actuals plus noise,
    the forecast is the overall mean plus noise, and the model and feature
    tables are fixed placeholders.
    """
    if not records:
        raise ValueError("fallback forecast needs at least one sales record")
    rng = rng if rng is not None else np.random.default_rng()

    test_size = math.floor(len(records) * HOLDOUT_FRACTION)
    held_out = list(records[len(records) - test_size:]) if test_size else []
    noise = rng.uniform(-HOLDOUT_NOISE, HOLDOUT_NOISE, size=len(held_out))
    test_predictions = [
        PredictionRecord(date=r.date, actual=r.sales, predicted=round_half_up(r.sales + n))
        for r, n in zip(held_out, noise)
    ]

    avg_sales = float(np.mean([r.sales for r in records]))
    horizon = future_dates(records[-1].date, FORECAST_DAYS)
    noise = rng.uniform(-FORECAST_NOISE, FORECAST_NOISE, size=len(horizon))
    future_predictions = [
        ForecastRecord(date=d, predicted=round_half_up(avg_sales + n))
        for d, n in zip(horizon, noise)
    ]

    models = [ModelMetrics(**m) for m in FALLBACK_MODELS]
    best = min(models, key=lambda m: m.mape)
    logger.info(
        f"Fallback analysis: {len(test_predictions)} held-out, "
        f"{len(future_predictions)} future days, mean sales {avg_sales:.1f}"
    )
    return AnalysisResult(
        models=models,
        best_model=best.name,
        test_predictions=test_predictions,
        future_predictions=future_predictions,
        feature_importance=[FeatureImportance(**f) for f in FALLBACK_FEATURE_IMPORTANCE],
    )
