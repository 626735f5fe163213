# logistics/core/__init__.py

"""
애플리케이션 전반에서 사용되는 핵심 구성 요소 패키지입니다.

- `config.py`: 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진과 세션 관리 (SQLModel + AsyncSQLAlchemy).
"""

__all__ = []
