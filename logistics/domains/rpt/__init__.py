# logistics/domains/rpt/__init__.py

"""
'rpt' 도메인 패키지입니다.

재고 예측 결과 테이블(analytics.inventory_forecast_daily)과
이를 조회하는 보고서 로직 및 API 엔드포인트, 예측 계산 백그라운드 태스크를 포함합니다.

주요 서브모듈:
- `models.py`: 예측 결과 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 계산 요청 및 보고서 응답에 대한 Pydantic 모델.
- `crud.py`: 최신 예측 조회, 일간 그룹화, 주간 집계 로직.
- `routers.py`: 계산 트리거 및 보고서 조회 FastAPI 엔드포인트.
- `tasks.py`: ARQ 워커가 실행하는 예측 계산 태스크.
"""

__title__ = "Report Domain"
__version__ = "0.1.0"
__all__ = []
