# scripts/run_forecast.py

import asyncio
import logging
from typing import Optional

import typer

from logistics.core.database import create_db_and_tables, engine
from logistics.services.forecast import InvalidForecastRequest, run_forecast

cli = typer.Typer()


async def run_once(base_date: str, timestamp: Optional[str], init_db: bool):
    """
    (필요하면 테이블을 만든 뒤) 재고 예측을 한 번 계산하는 비동기 함수
    """
    try:
        if init_db:
            await create_db_and_tables()
            print("데이터베이스 스키마 및 테이블 확인 완료.")
        return await run_forecast(base_date, timestamp)
    finally:
        await engine.dispose()


@cli.command()
def main(
    base_date: str = typer.Option(
        ..., '--base-date', '-d',
        help="업무 기준일 (YYYY-MM-DD) 입니다."
    ),
    timestamp: Optional[str] = typer.Option(
        None, '--timestamp', '-t',
        help="calculated_at에 기록할 시각 (YYYY-MM-DDTHH:MM:SS, UTC) 입니다. 생략하면 기준일 00:00 UTC."
    ),
    init_db: bool = typer.Option(
        False, '--init-db',
        help="계산 전에 스키마와 테이블을 생성합니다. (개발용)"
    ),
):
    """
    재고 예측을 다시 계산하여 analytics.inventory_forecast_daily 테이블을 교체합니다.
    """
    logging.basicConfig(level=logging.INFO)
    print(f"재고 예측 계산을 시작합니다... (기준일 {base_date})")

    try:
        summary = asyncio.run(run_once(base_date, timestamp, init_db))
    except InvalidForecastRequest as e:
        print(f"오류: {e}")
        raise typer.Exit(code=2)

    print(summary.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
