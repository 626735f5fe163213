# logistics/services/forecast/exceptions.py

class ForecastError(Exception):
    """재고 예측 엔진의 기본 예외."""


class InvalidForecastRequest(ForecastError, ValueError):
    """기준일 또는 계산 시각이 없거나 형식이 잘못된 경우."""
