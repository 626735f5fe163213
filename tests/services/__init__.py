# tests/services/__init__.py

"""
재고 예측 엔진(logistics.services.forecast)에 대한 테스트 패키지입니다.
"""

__all__ = []
