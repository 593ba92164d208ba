import json
from datetime import date, timedelta

import httpx
import pytest

from retail_sales.services.client import ForecastClient

ANALYSIS = {
    "models": [
        {"name": "Ridge", "mae": 30.0, "rmse": 40.0, "r2": 0.95, "mape": 2.5},
        {"name": "XGBoost", "mae": 25.0, "rmse": 33.0, "r2": 0.97, "mape": 2.0},
    ],
    "best_model": "XGBoost",
    "test_predictions": [
        {"date": "2023-12-30", "actual": 1800, "predicted": 1790},
        {"date": "2023-12-31", "actual": 1850, "predicted": 1861},
    ],
    "future_predictions": [{"date": "2024-01-01", "predicted": 1400}],
    "feature_importance": [{"feature": "lag_1", "importance": 0.6}],
}


def sample_payload(n: int = 120):
    start = date(2023, 1, 1)
    return {
        "data": [
            {"date": (start + timedelta(days=i)).isoformat(), "sales": 1000 + i}
            for i in range(n)
        ]
    }


class FakeService:
    """Routes requests to canned responses and records what was sent."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if isinstance(handler, Exception):
            raise handler
        status, body = handler
        if isinstance(body, (dict, list)):
            return httpx.Response(status, content=json.dumps(body).encode(), headers={"content-type": "application/json"})
        return httpx.Response(status, text=body)


@pytest.fixture
def online_service():
    return FakeService(
        {
            ("GET", "/health"): (200, {"status": "ok"}),
            ("GET", "/sample"): (200, sample_payload()),
            ("POST", "/predict"): (200, ANALYSIS),
            ("POST", "/upload"): (200, ANALYSIS),
        }
    )


@pytest.fixture
def offline_service():
    return FakeService(
        {
            ("GET", "/health"): httpx.ConnectError("connection refused"),
            ("GET", "/sample"): httpx.ConnectError("connection refused"),
            ("POST", "/predict"): httpx.ConnectError("connection refused"),
            ("POST", "/upload"): httpx.ConnectError("connection refused"),
        }
    )


def make_client(service: FakeService) -> ForecastClient:
    return ForecastClient("http://forecast.test", timeout=5, transport=httpx.MockTransport(service))


@pytest.fixture
def online_client(online_service):
    with make_client(online_service) as client:
        yield client


@pytest.fixture
def offline_client(offline_service):
    with make_client(offline_service) as client:
        yield client
