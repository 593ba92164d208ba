from typing import Iterable

from ..models.schemas import PredictionRecord

HEADER = "Date,Actual,Predicted"


def _fmt(value) -> str:
    # 1234.0 -> "1234", matching how the service's JSON numbers print
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def predictions_to_csv(predictions: Iterable[PredictionRecord]) -> str:
    lines = [HEADER]
    lines.extend(
        f"{p.date.isoformat()},{_fmt(p.actual)},{_fmt(p.predicted)}" for p in predictions
    )
    return "\n".join(lines)
