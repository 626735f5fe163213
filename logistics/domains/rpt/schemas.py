# logistics/domains/rpt/schemas.py

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from logistics.services.forecast.buckets import BucketKind


# =============================================================================
# 계산 요청 / 응답
# =============================================================================
class ForecastCalculateRequest(BaseModel):
    """
    재고 예측 계산 요청입니다. 기준일과 시각은 변환 없이 그대로 사용합니다.
    """
    base_date: str = Field(..., description="업무 기준일 (YYYY-MM-DD)")
    timestamp: Optional[str] = Field(None, description="calculated_at에 기록할 시각 (YYYY-MM-DDTHH:MM:SS, UTC)")


class ForecastCalculateResponse(BaseModel):
    success: bool = True
    message: str
    job_id: Optional[str] = Field(None, description="백그라운드로 실행한 경우 ARQ 작업 ID")
    summary: Optional[dict] = Field(None, description="즉시 실행한 경우 계산 요약")


# =============================================================================
# 일간 보고서
# =============================================================================
class DailyForecastPoint(BaseModel):
    forecast_date: date
    day_number: int = Field(..., description="조회 시작일 기준 1부터 시작하는 일차")
    historical_inventory: int
    planned_inbound: int
    planned_outbound: int
    forecast_inventory: int


class BucketForecastSeries(BaseModel):
    location_id: Optional[int] = None
    location_group: BucketKind
    location_name: str
    daily_data: List[DailyForecastPoint] = []


class DateRange(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None


class ForecastReportSummary(BaseModel):
    total_locations: int = 0
    date_range: DateRange = DateRange()
    calculated_at: Optional[datetime] = None


class ForecastReport(BaseModel):
    data: List[BucketForecastSeries] = []
    summary: ForecastReportSummary = ForecastReportSummary()


# =============================================================================
# 주간 보고서
# =============================================================================
class WeeklyForecastPoint(BaseModel):
    week_number: int
    week_start: date
    week_end: date
    starting_inventory: int = Field(..., description="주 첫날의 시작 재고")
    total_inbound: int
    total_outbound: int
    ending_inventory: int = Field(..., description="주 마지막 날의 예측 재고")


class BucketWeeklySeries(BaseModel):
    location_id: Optional[int] = None
    location_group: BucketKind
    location_name: str
    weekly_data: List[WeeklyForecastPoint] = []


class WeeklyForecastReport(BaseModel):
    data: List[BucketWeeklySeries] = []
    summary: ForecastReportSummary = ForecastReportSummary()
