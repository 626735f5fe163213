# logistics/utils/__init__.py

"""
특정 비즈니스 도메인에 속하지 않는 범용 유틸리티 패키지입니다.

주요 서브모듈:
- `dates.py`: 시스템 시계를 읽지 않는 날짜 계산/파싱 유틸리티.
"""

# flake8: noqa
from . import dates

__all__ = ["dates"]
