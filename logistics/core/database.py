# logistics/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 스키마 및 테이블을 생성하는 함수를 포함합니다 (개발/테스트용).
"""

from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core.config import settings

# =============================================================================
# 모든 도메인 모델 임포트
# =============================================================================
# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 명시적으로 임포트합니다.
from logistics.domains.loc import models  # noqa
from logistics.domains.oms import models  # noqa
from logistics.domains.wms import models  # noqa
from logistics.domains.rpt import models  # noqa

# 도메인별 PostgreSQL 스키마 (analytics는 예측 결과 테이블 전용)
SCHEMAS = ["loc", "oms", "wms", "analytics"]


def build_engine(url: str, *, echo: bool = False, **kwargs) -> AsyncEngine:
    """
    URL에 맞는 비동기 엔진을 생성합니다.
    SQLite는 스키마를 지원하지 않으므로, 스키마 이름을 제거하는 schema_translate_map을 적용합니다.
    """
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            execution_options={"schema_translate_map": {name: None for name in SCHEMAS}},
            **kwargs,
        )
    if "poolclass" not in kwargs:
        kwargs.setdefault("pool_recycle", 3600)  # 1시간마다 연결 재활용
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 20)
    return create_async_engine(url, echo=echo, **kwargs)


engine: AsyncEngine = build_engine(
    settings.DATABASE_URL.get_secret_value(),  # SecretStr 값에 접근
    echo=settings.DEBUG_MODE,  # 디버그 모드일 때만 SQL 쿼리 출력
)

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables(bind: AsyncEngine = engine) -> None:
    """
    데이터베이스 스키마 및 테이블을 생성합니다.
    개발 환경에서만 사용해야 하며, 기존 테이블을 삭제하지는 않습니다.
    """
    async with bind.begin() as conn:
        if conn.dialect.name == "postgresql":
            for schema_name in SCHEMAS:
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
        await conn.run_sync(SQLModel.metadata.create_all)


# =============================================================================
# 비동기 데이터베이스 세션
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ Task, CLI 등 요청 밖의 비동기 컨텍스트에서 사용할
    독립적인 비동기 DB 세션을 제공하는 컨텍스트 관리자입니다.
    정상 종료 시 커밋하고, 예외 발생 시 롤백한 뒤 예외를 그대로 전달합니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
