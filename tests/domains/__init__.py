# tests/domains/__init__.py

"""
도메인별 테스트 패키지입니다.

- `test_rpt_n.py`: 'rpt' 도메인 (재고 예측 보고서 조회, 계산 트리거, ARQ 태스크).
"""

__all__ = []
