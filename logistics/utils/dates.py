# logistics/utils/dates.py

"""
날짜 계산 유틸리티입니다.

이 모듈의 함수들은 현재 시각을 읽지 않고, 전달받은 날짜만 다룹니다.
시스템이 사용하는 '업무 기준일'은 항상 호출하는 쪽에서 넘겨줘야 합니다.
타임스탬프는 UTC 기준으로 날짜를 자릅니다 (naive datetime은 UTC로 간주).
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Union


def monday_of_week(day: date) -> date:
    """주어진 날짜가 속한 주의 월요일을 반환합니다."""
    return day - timedelta(days=day.weekday())


def iter_dates(start: date, end: date) -> Iterator[date]:
    """start부터 end까지(양 끝 포함) 하루씩 순회합니다. start > end면 아무것도 내지 않습니다."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def parse_date(value: Union[date, str]) -> date:
    """
    date 객체 또는 'YYYY-MM-DD' 문자열을 date로 변환합니다.

    Raises:
        ValueError: 형식이 올바르지 않은 경우.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_timestamp(value: Union[datetime, str]) -> datetime:
    """
    datetime 객체 또는 'YYYY-MM-DDTHH:MM:SS' 문자열을 UTC aware datetime으로 변환합니다.
    타임존 정보가 없으면 UTC로 간주합니다 (입력값을 변환하지 않고 그대로 사용).
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day_utc(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def utc_date(value: datetime) -> date:
    """타임스탬프의 UTC 기준 날짜를 반환합니다."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()
