# logistics/domains/rpt/routers.py

import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core import dependencies as deps
from logistics.core.config import settings
from logistics.services.forecast import (
    BucketKind,
    ForecastError,
    InvalidForecastRequest,
    parse_forecast_request,
    run_forecast,
)
from . import crud, schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Inventory Forecast (재고 예측)"],
    responses={404: {"description": "Not found"}},
)


@router.post("/inventory-forecast/calculate", response_model=schemas.ForecastCalculateResponse)
async def calculate_inventory_forecast(
    request: Request,
    forecast_in: schemas.ForecastCalculateRequest,
    background: bool = Query(False, description="ARQ 워커에 작업을 넘기고 바로 응답합니다."),
    session_factory=Depends(deps.get_session_factory),
):
    """
    재고 예측을 다시 계산하여 결과 테이블을 교체합니다.
    background=true이고 ARQ Redis 풀이 있으면 워커에 작업을 넘깁니다.
    """
    arq_redis_pool = getattr(request.app.state, "redis", None)
    if background and arq_redis_pool:
        # 형식이 잘못된 요청은 워커에 넘기기 전에 거절합니다.
        try:
            parse_forecast_request(forecast_in.base_date, forecast_in.timestamp)
        except InvalidForecastRequest as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        job = await arq_redis_pool.enqueue_job(
            "calculate_inventory_forecast_task",
            forecast_in.base_date,
            forecast_in.timestamp,
        )
        logger.info("ARQ Job enqueued: calculate_inventory_forecast_task for base date %s", forecast_in.base_date)
        return schemas.ForecastCalculateResponse(
            message="Inventory forecast calculation queued.",
            job_id=job.job_id if job else None,
        )

    try:
        summary = await run_forecast(
            forecast_in.base_date, forecast_in.timestamp, session_factory=session_factory
        )
    except InvalidForecastRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ForecastError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except Exception as e:
        logger.exception("Inventory forecast calculation failed.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Inventory forecast calculation failed: {e}",
        )

    return schemas.ForecastCalculateResponse(
        message="Inventory forecast calculated successfully.",
        summary=summary.model_dump(mode="json"),
    )


@router.get("/inventory-forecast", response_model=schemas.ForecastReport)
async def read_inventory_forecast(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    bucket_kind: Optional[BucketKind] = None,
    session: AsyncSession = Depends(deps.get_db_session),
):
    """
    가장 최근에 계산된 일별 재고 예측을 버킷별로 조회합니다.
    기간을 생략하면 최근 계산의 전체 범위를 사용합니다.
    """
    calculation_range = await crud.get_latest_calculation_range(session)
    if calculation_range is None:
        return schemas.ForecastReport()

    start_date = start_date or calculation_range[0]
    end_date = end_date or calculation_range[1]
    if start_date > end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start_date must not be after end_date")

    records = await crud.get_forecast_records(
        session, start_date=start_date, end_date=end_date, bucket_kind=bucket_kind
    )
    series = crud.group_daily(records, start_date)
    return schemas.ForecastReport(
        data=series,
        summary=schemas.ForecastReportSummary(
            total_locations=len(series),
            date_range=schemas.DateRange(start=start_date, end=end_date),
            calculated_at=await crud.get_latest_calculated_at(session),
        ),
    )


@router.get("/inventory-forecast/weekly", response_model=schemas.WeeklyForecastReport)
async def read_weekly_inventory_forecast(
    start_date: Optional[date] = None,
    weeks: int = Query(settings.FORECAST_WEEKLY_WEEKS, ge=1, le=52),
    bucket_kind: Optional[BucketKind] = None,
    session: AsyncSession = Depends(deps.get_db_session),
):
    """
    일별 예측을 시작일부터 7일 단위로 묶어 주간 재고 예측을 조회합니다.
    시작일을 생략하면 최근 계산의 첫날(기준일이 속한 주의 월요일)을 사용합니다.
    """
    calculation_range = await crud.get_latest_calculation_range(session)
    if calculation_range is None:
        return schemas.WeeklyForecastReport()

    start_date = start_date or calculation_range[0]
    end_date = start_date + timedelta(days=weeks * 7 - 1)
    records = await crud.get_forecast_records(
        session, start_date=start_date, end_date=end_date, bucket_kind=bucket_kind
    )
    weekly = crud.rollup_weekly(crud.group_daily(records, start_date), weeks=weeks)
    return schemas.WeeklyForecastReport(
        data=weekly,
        summary=schemas.ForecastReportSummary(
            total_locations=len(weekly),
            date_range=schemas.DateRange(start=start_date, end=end_date),
            calculated_at=await crud.get_latest_calculated_at(session),
        ),
    )
