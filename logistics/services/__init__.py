# logistics/services/__init__.py

"""
여러 도메인에 걸친 비즈니스 로직을 담는 서비스 패키지입니다.

- `forecast`: loc, oms, wms 도메인을 읽어 rpt 도메인에 일별 재고 예측을 기록하는 배치 엔진.
"""
