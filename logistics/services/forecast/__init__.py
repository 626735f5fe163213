# logistics/services/forecast/__init__.py

"""
재고 예측 엔진 패키지입니다.

- `buckets.py`: 버킷 종류와 단일 분류 규칙(`classify`).
- `catalog.py`: 예측 대상 행 목록 결정.
- `aggregators.py`: 현재 재고, 예정 입고, 예정 출고 일괄 조회.
- `projector.py`: 버킷별 일별 예측 (순수 함수).
- `store.py`: 결과 테이블 전체 교체.
- `engine.py`: 위 단계를 묶는 `run_forecast`.
"""

# flake8: noqa
from .buckets import BucketKey, BucketKind, BucketRules, ForecastRow, LocationIndex, LocationRef, classify
from .engine import ForecastRunSummary, ForecastWindow, forecast_window, parse_forecast_request, run_forecast
from .exceptions import ForecastError, InvalidForecastRequest
from .projector import ForecastRecord, project_row

__all__ = [
    "BucketKey", "BucketKind", "BucketRules", "ForecastRow", "LocationIndex", "LocationRef", "classify",
    "ForecastRunSummary", "ForecastWindow", "forecast_window", "parse_forecast_request", "run_forecast",
    "ForecastError", "InvalidForecastRequest",
    "ForecastRecord", "project_row",
]
