# logistics/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 요청 단위 데이터베이스 세션 (get_db_session).
- 요청 밖에서 독립 세션을 여는 세션 팩토리 (get_session_factory).
"""

from typing import AsyncGenerator

from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core.database import get_async_session_context
from logistics.core.database import get_session as get_main_app_session


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    요청마다 비동기 DB 세션을 제공합니다.
    """
    async for session in get_main_app_session():
        yield session


def get_session_factory():
    """
    예측 엔진이 집계기마다 독립 세션을 열 때 사용하는 팩토리를 반환합니다.
    테스트에서는 dependency_overrides로 교체합니다.
    """
    return get_async_session_context
