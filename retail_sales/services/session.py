"""
Dashboard state transitions.

The reducers at the top only build a new ``AppState``. The orchestration
functions below them talk to the forecasting service and fold the outcome
back in, falling back to local computation where the dashboard always has.
"""
import logging
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from ..core.config import MIN_RECORDS
from ..models.schemas import AnalysisResult, AppState, LogEntry, SalesRecord
from .client import ForecastClient
from .data_loader import parse_sales_csv
from .export import predictions_to_csv
from .forecast_engine import run_fallback
from .metrics import accuracy_pct, best_model_metrics
from .synthesizer import generate_sample_data

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Reducers
# ------------------------------------------------------------------
def add_log(state: AppState, message: str, now: Optional[datetime] = None) -> AppState:
    logger.info(message)
    entry = LogEntry(time=(now or datetime.now()).strftime("%H:%M:%S"), message=message)
    return state.model_copy(update={"logs": state.logs + (entry,)})


def set_data(state: AppState, records: Sequence[SalesRecord]) -> AppState:
    return state.model_copy(update={"data": tuple(records)})


def set_results(state: AppState, result: AnalysisResult) -> AppState:
    return state.model_copy(
        update={"results": result, "predictions": tuple(result.test_predictions)}
    )


def reset(state: AppState) -> AppState:
    return AppState(api_status=state.api_status)


# ------------------------------------------------------------------
# Actions
# ------------------------------------------------------------------
def check_api(state: AppState, client: ForecastClient) -> AppState:
    if client.check_health():
        state = state.model_copy(update={"api_status": "connected"})
        return add_log(state, "Connected to the forecasting API")
    state = state.model_copy(update={"api_status": "error"})
    return add_log(state, "Cannot reach the forecasting API - using local mode")


def load_file(state: AppState, file_name: str, content: bytes) -> AppState:
    state = state.model_copy(update={"file_name": file_name, "file_content": content})
    state = add_log(state, f"Loaded file: {file_name}")
    records = parse_sales_csv(content)
    state = set_data(state, records)
    return add_log(state, f"Loaded {len(records)} records")


def load_sample(
    state: AppState, client: ForecastClient, rng: Optional[np.random.Generator] = None
) -> AppState:
    state = add_log(state, "Fetching sample data from the API...")
    outcome = client.fetch_sample()
    if outcome.ok:
        state = set_data(state, outcome.value)
        return add_log(state, f"Generated {len(outcome.value)} records")
    state = add_log(state, "Generating local sample data...")
    records = generate_sample_data(rng=rng)
    state = set_data(state, records)
    return add_log(state, f"Generated {len(records)} records")


def _validate_data(state: AppState) -> Optional[str]:
    if not state.data:
        return "Error: no data loaded"
    if len(state.data) < MIN_RECORDS:
        return f"Error: at least {MIN_RECORDS} records are required"
    return None


def _log_training_done(state: AppState, result: AnalysisResult, with_accuracy: bool) -> AppState:
    state = add_log(state, "Training complete")
    state = add_log(state, f"Best model: {result.best_model}")
    best = best_model_metrics(result)
    if with_accuracy and best is not None:
        state = add_log(state, f"Accuracy: {accuracy_pct(best):.2f}%")
    return state


def train(
    state: AppState, client: ForecastClient, rng: Optional[np.random.Generator] = None
) -> AppState:
    problem = _validate_data(state)
    if problem:
        return add_log(state, problem)

    state = state.model_copy(update={"training": True})
    state = add_log(state, "Starting model training...")
    outcome = client.predict(state.data)
    if outcome.ok:
        state = set_results(state, outcome.value)
        state = _log_training_done(state, outcome.value, with_accuracy=True)
    else:
        state = add_log(state, f"API error: {outcome.error}")
        state = add_log(state, "Using local simulation...")
        state = set_results(state, run_fallback(state.data, rng=rng))
        state = add_log(state, "Local analysis complete")
    return state.model_copy(update={"training": False})


def train_with_file(state: AppState, client: ForecastClient) -> AppState:
    if not state.file_name or state.file_content is None:
        return add_log(state, "Error: no file selected")

    state = state.model_copy(update={"training": True})
    state = add_log(state, "Uploading file and training...")
    outcome = client.upload(state.file_name, state.file_content)
    if outcome.ok:
        state = set_results(state, outcome.value)
        state = _log_training_done(state, outcome.value, with_accuracy=False)
    else:
        state = add_log(state, f"Upload error: {outcome.error}")
        state = add_log(state, "Try local training instead")
    return state.model_copy(update={"training": False})


def export_predictions(state: AppState) -> Optional[str]:
    if state.predictions is None:
        return None
    return predictions_to_csv(state.predictions)


def record_download(state: AppState) -> AppState:
    return add_log(state, "Downloaded predictions as CSV")
