"""
Client for the remote forecasting service.

Every call returns an ``Outcome`` rather than raising: transport errors,
non-2xx statuses and bodies that fail validation all come back as a
``ConnectivityError`` and the caller picks the fallback.
"""
import logging
from dataclasses import dataclass
from typing import Generic, Optional, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from ..core.config import API_TIMEOUT, API_URL
from ..models.schemas import AnalysisResult, SalesRecord, SampleResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConnectivityError(Exception):
    """The forecasting service was unreachable or gave an unusable answer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[ConnectivityError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ForecastClient:
    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = API_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ConnectivityError(f"{type(e).__name__}: {e}") from e
        if not response.is_success:
            logger.warning(f"{method} {path} returned {response.status_code}")
            raise ConnectivityError(
                f"{path} returned HTTP {response.status_code}", response.status_code
            )
        return response

    def check_health(self) -> bool:
        try:
            self._request("GET", "/health")
        except ConnectivityError:
            return False
        return True

    def _call(self, model, method: str, path: str, **kwargs) -> Outcome:
        try:
            response = self._request(method, path, **kwargs)
            return Outcome(value=model.model_validate(response.json()))
        except ConnectivityError as e:
            return Outcome(error=e)
        except (ValueError, ValidationError) as e:
            # json decode errors are ValueErrors too
            logger.warning(f"{method} {path} gave an unusable body: {e}")
            return Outcome(error=ConnectivityError(f"invalid response from {path}"))

    def fetch_sample(self) -> Outcome:
        outcome = self._call(SampleResponse, "GET", "/sample")
        if outcome.ok:
            return Outcome(value=outcome.value.data)
        return outcome

    def predict(self, records: Sequence[SalesRecord]) -> Outcome:
        payload = [r.model_dump(mode="json") for r in records]
        return self._call(AnalysisResult, "POST", "/predict", json=payload)

    def upload(self, file_name: str, content: bytes) -> Outcome:
        files = {"file": (file_name, content, "text/csv")}
        return self._call(AnalysisResult, "POST", "/upload", files=files)
