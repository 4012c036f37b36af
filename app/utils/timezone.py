"""시간대 유틸리티 — UTC 정규화와 매장 현지 날짜 계산.

Timezone helpers. All datetimes are stored as UTC; naive values (e.g. read
back from SQLite) are treated as UTC.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """datetime을 UTC aware 값으로 변환합니다. naive 값은 UTC로 간주."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def local_day_bounds(tz_name: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """매장 시간대 기준 오늘의 [시작, 다음날 시작) 구간을 UTC로 반환합니다.

    Return the UTC bounds of "today" in the given IANA timezone.
    """
    tz: ZoneInfo = ZoneInfo(tz_name)
    local_now: datetime = to_utc(now or utc_now()).astimezone(tz)
    start: datetime = datetime.combine(local_now.date(), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), (start + timedelta(days=1)).astimezone(timezone.utc)


def date_bounds(start: date, end: date, tz_name: str) -> tuple[datetime, datetime]:
    """날짜 범위 [start, end]를 매장 시간대 기준 UTC 구간으로 변환합니다."""
    tz: ZoneInfo = ZoneInfo(tz_name)
    lower: datetime = datetime.combine(start, time.min, tzinfo=tz)
    upper: datetime = datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz)
    return lower.astimezone(timezone.utc), upper.astimezone(timezone.utc)
