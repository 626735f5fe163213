import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool, RedisSettings

from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from logistics import API_PREFIX, APP_NAME, APP_VERSION
from logistics.core.config import settings
from logistics.core.database import engine, get_session

# 태스크 모듈 임포트
from logistics.domains.rpt import tasks as rpt_tasks

# 라우터 임포트
from logistics.domains.rpt.routers import router as rpt_router

logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    rpt_tasks.calculate_inventory_forecast_task,
]


# ARQ 워커 설정 클래스
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중...")
    try:
        # ARQ Redis 커넥션 풀 생성 및 app.state에 할당
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")
    except Exception as e:
        logger.error("애플리케이션 시작 중 오류 발생: %s", e)
        raise

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    try:
        if app.state.redis:
            await app.state.redis.close()
            logger.info("ARQ Redis 연결 풀 종료 완료.")

        await engine.dispose()
        logger.info("데이터베이스 연결 풀 종료 완료.")
    except Exception as e:
        logger.error("애플리케이션 종료 중 오류 발생: %s", e)


app = FastAPI(
    title=APP_NAME,
    description="Daily and weekly pallet inventory forecast for the logistics ERP.",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 개발용: 모든 출처 허용
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rpt_router, prefix=f"{API_PREFIX}/rpt", tags=["Inventory Forecast (재고 예측)"])


@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": f"Welcome to {APP_NAME}. Visit /docs for interactive API documentation."}


@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.execute(text("SELECT 1"))
        if result.scalar_one_or_none() == 1:
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )
