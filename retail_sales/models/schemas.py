from datetime import date
from typing import List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field

# Keeps ints as ints so exported values match what the service returned.
Number = Union[int, float]


class SalesRecord(BaseModel):
    date: date
    sales: Number


class PredictionRecord(BaseModel):
    date: date
    actual: Number
    predicted: Number


class ForecastRecord(BaseModel):
    date: date
    predicted: Number


class ModelMetrics(BaseModel):
    name: str
    mae: float
    rmse: float
    r2: float
    mape: float


class FeatureImportance(BaseModel):
    feature: str
    importance: Number


class AnalysisResult(BaseModel):
    models: List[ModelMetrics]
    best_model: str
    test_predictions: List[PredictionRecord]
    future_predictions: List[ForecastRecord] = Field(default_factory=list)
    feature_importance: List[FeatureImportance] = Field(default_factory=list)


class SampleResponse(BaseModel):
    data: List[SalesRecord]


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: str  # HH:MM:SS
    message: str


class AppState(BaseModel):
    """Everything the dashboard shows; replaced wholesale on each transition."""

    model_config = ConfigDict(frozen=True)

    file_name: Optional[str] = None
    file_content: Optional[bytes] = None
    data: Optional[Tuple[SalesRecord, ...]] = None
    results: Optional[AnalysisResult] = None
    predictions: Optional[Tuple[PredictionRecord, ...]] = None
    logs: Tuple[LogEntry, ...] = ()
    api_status: Literal["checking", "connected", "error"] = "checking"
    training: bool = False
