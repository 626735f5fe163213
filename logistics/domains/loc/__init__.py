# logistics/domains/loc/__init__.py

"""
'loc' 도메인 패키지입니다.

이 패키지는 PostgreSQL의 'loc' 스키마에 해당하는 데이터 모델을 포함합니다.

'loc' 도메인은 아마존 FC, 운송사 허브(FEDEX, UPS), 자체 창고 등 물리적 위치(Location) 카탈로그를
관리합니다. 재고 예측 엔진은 이 카탈로그에서 예측 대상 행을 결정합니다.
"""

__title__ = "Location Domain"
__version__ = "0.1.0"
__all__ = []
