# logistics/__init__.py

"""
물류 ERP 백엔드의 메인 패키지입니다.

이 패키지는 공통 설정과 데이터베이스 연결을 담는 core 서브패키지,
PostgreSQL 스키마 단위로 나뉜 domains 서브패키지(loc, oms, wms, rpt),
그리고 여러 도메인을 가로지르는 배치 로직(재고 예측 엔진)을 담는 services 서브패키지로 구성됩니다.
"""

APP_NAME = "Logistics ERP Forecast API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Logistics ERP backend: daily pallet inventory forecast engine."
__all__ = []
