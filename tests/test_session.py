"""
Tests for dashboard state transitions and the fallback flow.
"""
from datetime import date, datetime, timedelta

import numpy as np

from retail_sales.models.schemas import AppState, SalesRecord
from retail_sales.services import session

from conftest import FakeService, make_client


def records(n: int) -> tuple:
    start = date(2023, 1, 1)
    return tuple(SalesRecord(date=start + timedelta(days=i), sales=1000 + i) for i in range(n))


def messages(state: AppState) -> list[str]:
    return [e.message for e in state.logs]


class TestReducers:
    def test_add_log_is_immutable(self):
        state = AppState()
        new = session.add_log(state, "hello", now=datetime(2024, 5, 1, 9, 30, 5))
        assert state.logs == ()
        assert new.logs[0].time == "09:30:05"
        assert new.logs[0].message == "hello"

    def test_reset_keeps_api_status(self):
        state = AppState(api_status="connected", data=records(5), file_name="x.csv")
        state = session.add_log(state, "something")
        fresh = session.reset(state)
        assert fresh == AppState(api_status="connected")


class TestCheckApi:
    def test_connected(self, online_client):
        state = session.check_api(AppState(), online_client)
        assert state.api_status == "connected"
        assert len(state.logs) == 1

    def test_offline(self, offline_client):
        state = session.check_api(AppState(), offline_client)
        assert state.api_status == "error"
        assert "local mode" in messages(state)[0]


class TestLoadData:
    def test_load_file(self):
        content = b"date,sales\n2023-01-01,100\n,200\n2023-01-02,150\n"
        state = session.load_file(AppState(), "sales.csv", content)
        assert state.file_name == "sales.csv"
        assert state.file_content == content
        assert len(state.data) == 2
        assert messages(state) == ["Loaded file: sales.csv", "Loaded 2 records"]

    def test_sample_from_api(self, online_client):
        state = session.load_sample(AppState(), online_client)
        assert len(state.data) == 120

    def test_sample_falls_back_to_synthesizer(self, offline_client):
        state = session.load_sample(AppState(), offline_client, rng=np.random.default_rng(0))
        assert len(state.data) == 365
        assert state.data[0].date == date(2023, 1, 1)
        assert "Generating local sample data..." in messages(state)


class TestTrain:
    def test_rejects_missing_data(self, online_service, online_client):
        state = session.train(AppState(), online_client)
        assert state.results is None
        assert messages(state) == ["Error: no data loaded"]
        assert online_service.requests == []

    def test_rejects_short_series(self, online_service, online_client):
        state = session.train(AppState(data=records(99)), online_client)
        assert state.results is None
        assert "at least 100" in messages(state)[-1]
        assert online_service.requests == []

    def test_remote_result(self, online_client):
        state = session.train(AppState(data=records(120)), online_client)
        assert state.results.best_model == "XGBoost"
        assert state.predictions == tuple(state.results.test_predictions)
        assert state.training is False
        assert "Accuracy: 98.00%" in messages(state)

    def test_falls_back_when_offline(self, offline_client):
        state = session.train(AppState(data=records(365)), offline_client, rng=np.random.default_rng(2))
        assert state.results.best_model == "Random Forest"
        assert len(state.predictions) == 73
        assert len(state.results.future_predictions) == 30
        assert messages(state)[-1] == "Local analysis complete"
        assert any(m.startswith("API error:") for m in messages(state))

    def test_falls_back_on_error_status(self):
        service = FakeService({("POST", "/predict"): (502, "bad gateway")})
        with make_client(service) as client:
            state = session.train(AppState(data=records(100)), client)
        assert len(state.results.models) == 3
        assert len(state.predictions) == 20


class TestTrainWithFile:
    def test_requires_file(self, online_client):
        state = session.train_with_file(AppState(data=records(120)), online_client)
        assert messages(state) == ["Error: no file selected"]

    def test_upload_success(self, online_client):
        state = AppState(data=records(120), file_name="s.csv", file_content=b"date,sales\n")
        state = session.train_with_file(state, online_client)
        assert state.results.best_model == "XGBoost"
        assert "Best model: XGBoost" in messages(state)

    def test_upload_failure_has_no_fallback(self, offline_client):
        state = AppState(data=records(120), file_name="s.csv", file_content=b"date,sales\n")
        state = session.train_with_file(state, offline_client)
        assert state.results is None
        assert state.training is False
        assert messages(state)[-1] == "Try local training instead"


class TestExport:
    def test_no_predictions(self):
        assert session.export_predictions(AppState()) is None

    def test_csv_and_log(self, offline_client):
        state = session.train(AppState(data=records(100)), offline_client)
        csv = session.export_predictions(state)
        assert csv.split("\n")[0] == "Date,Actual,Predicted"
        assert len(csv.split("\n")) == 21
        state = session.record_download(state)
        assert messages(state)[-1] == "Downloaded predictions as CSV"
