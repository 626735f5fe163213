# tests/__init__.py

"""
물류 ERP 재고 예측 백엔드의 테스트 스위트 패키지입니다.

- `services/`: 재고 예측 엔진(분류, 집계, 예측, 저장, 전체 실행)에 대한 테스트.
- `domains/`: 도메인별 API 엔드포인트와 조회 로직에 대한 테스트.
- `conftest.py`: 테스트 DB, 세션 팩토리, 테스트 데이터 생성기, 테스트 클라이언트 픽스처.
"""

__title__ = "Logistics Forecast API Tests"
__version__ = "0.1.0"
__all__ = []
