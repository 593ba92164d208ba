import os
from datetime import date

API_URL = os.environ.get("RETAIL_SALES_API_URL", "https://retail-sales-api.onrender.com")
API_TIMEOUT = float(os.environ.get("RETAIL_SALES_API_TIMEOUT", "30"))

SAMPLE_START = date(2023, 1, 1)
SAMPLE_DAYS = 365
MIN_RECORDS = 100
HOLDOUT_FRACTION = 0.2
FORECAST_DAYS = 30
EXPORT_FILE_NAME = "predictions.csv"

# Placeholder tables shown when the forecasting service is unreachable.
FALLBACK_MODELS = [
    {"name": "Linear Regression", "mae": 45.23, "rmse": 58.67, "r2": 0.912, "mape": 3.82},
    {"name": "Random Forest", "mae": 38.15, "rmse": 51.44, "r2": 0.941, "mape": 3.12},
    {"name": "Gradient Boosting", "mae": 41.89, "rmse": 54.23, "r2": 0.928, "mape": 3.45},
]
FALLBACK_FEATURE_IMPORTANCE = [
    {"feature": "sales_lag_7", "importance": 85},
    {"feature": "sales_rolling_mean_14", "importance": 78},
    {"feature": "day_of_week", "importance": 65},
    {"feature": "month", "importance": 58},
    {"feature": "is_weekend", "importance": 52},
]
