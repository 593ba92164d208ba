from typing import Optional

from ..models.schemas import AnalysisResult, ModelMetrics


def best_model_metrics(result: AnalysisResult) -> Optional[ModelMetrics]:
    return next((m for m in result.models if m.name == result.best_model), None)


def accuracy_pct(metrics: ModelMetrics) -> float:
    """Accuracy as the dashboard reports it: 100 - MAPE."""
    return (1 - metrics.mape / 100) * 100
