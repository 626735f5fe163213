# tests/conftest.py

import os
from contextlib import asynccontextmanager
from datetime import date, datetime
from itertools import count
from typing import AsyncGenerator, Iterable, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlalchemy import text
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.main import app as main_app
from logistics.core import dependencies as deps
from logistics.core.database import SCHEMAS, build_engine, get_session

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델이 한 번 이상 임포트되어야 합니다.
from logistics.domains.models import *    # noqa: F401, F403
from logistics.domains.loc import models as loc_models
from logistics.domains.oms import models as oms_models
from logistics.domains.wms import models as wms_models


# --- 테스트용 데이터베이스 설정 ---
# TEST_DATABASE_URL이 있으면 (예: postgresql+asyncpg://...) 그 DB를, 없으면 테스트마다 새 SQLite 파일을 사용합니다.
# 세 집계기가 각자 연결을 열어 동시에 조회하므로 메모리 DB 대신 파일 DB를 사용합니다.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """
    테스트마다 테이블을 새로 만들고, 끝나면 삭제합니다.
    """
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'forecast_test.db'}"
    engine = build_engine(url, poolclass=NullPool)

    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            for schema_name in SCHEMAS:
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """
    get_async_session_context와 같은 방식으로 동작하는 테스트용 세션 팩토리입니다.
    """
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    @asynccontextmanager
    async def _session_context() -> AsyncGenerator[AsyncSession, None]:
        async with TestingSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return _session_context


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    테스트 데이터 생성과 결과 확인에 사용하는 비동기 DB 세션입니다.
    """
    async with session_factory() as session:
        yield session


# --- 테스트 데이터 생성기 ---
class ForecastSeeder:
    """
    위치, 주문 명세, 재고 로트, 입고 예정, 배송 예약을 만들어 커밋합니다.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._order_numbers = count(1)

    async def _save(self, obj):
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def location(self, code: Optional[str], location_type: str = "amazon", name: Optional[str] = None):
        return await self._save(loc_models.Location(location_code=code, name=name, location_type=location_type))

    async def order(self):
        return await self._save(oms_models.Order(order_number=f"ORD-{next(self._order_numbers):05d}"))

    async def order_detail(
        self,
        delivery_location: Optional[str],
        delivery_nature: Optional[str] = None,
        estimated_pallets: Optional[int] = None,
        order: Optional[oms_models.Order] = None,
    ):
        order = order or await self.order()
        return await self._save(
            oms_models.OrderDetail(
                order_id=order.order_id,
                delivery_location=delivery_location,
                delivery_nature=delivery_nature,
                estimated_pallets=estimated_pallets,
            )
        )

    async def lot(
        self,
        detail: oms_models.OrderDetail,
        remaining: Optional[int],
        receipt: Optional[wms_models.InboundReceipt] = None,
        status: str = "available",
    ):
        return await self._save(
            wms_models.InventoryLot(
                order_detail_id=detail.id,
                inbound_receipt_id=receipt.inbound_receipt_id if receipt else None,
                remaining_pallet_count=remaining,
                status=status,
            )
        )

    async def receipt(self, order_id: int, planned_unload_at: datetime, status: str = "pending"):
        return await self._save(
            wms_models.InboundReceipt(order_id=order_id, planned_unload_at=planned_unload_at, status=status)
        )

    async def appointment(
        self,
        confirmed_start: Optional[datetime],
        lines: Iterable[Tuple[oms_models.OrderDetail, int]],
        rejected: Optional[bool] = None,
        status: str = "confirmed",
    ):
        appointment = await self._save(
            oms_models.DeliveryAppointment(confirmed_start=confirmed_start, rejected=rejected, status=status)
        )
        for detail, pallets in lines:
            self.db.add(
                oms_models.AppointmentDetailLine(
                    appointment_id=appointment.appointment_id,
                    order_detail_id=detail.id,
                    estimated_pallets=pallets,
                )
            )
        await self.db.commit()
        return appointment


@pytest.fixture(scope="function")
def seed(db_session: AsyncSession) -> ForecastSeeder:
    return ForecastSeeder(db_session)


@pytest.fixture(scope="session")
def base_date() -> date:
    """수요일. 월요일은 2025-01-13입니다."""
    return date(2025, 1, 15)


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    테스트 DB 세션과 세션 팩토리를 주입한 AsyncClient 인스턴스를 생성합니다.
    ASGITransport는 lifespan을 실행하지 않으므로 ARQ Redis 풀 없이 동작합니다.
    """

    async def override_get_session_and_dependency():
        async with session_factory() as session:
            yield session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_db_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_session_factory] = lambda: session_factory

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client
    finally:
        # 클라이언트 픽스처가 끝나면 오버라이드를 반드시 복원해야 합니다.
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)
