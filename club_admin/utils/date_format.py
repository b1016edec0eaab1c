# club_admin/utils/date_format.py
import math
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]

TR_MONTHS = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """
    date, datetime 또는 ISO 8601 문자열을 date로 변환합니다.

    Raises:
        ValueError: 문자열이 ISO 형식이 아닐 때.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if "T" in text or " " in text:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


def format_date(value: Optional[DateLike]) -> str:
    """tr-TR 긴 날짜 형식으로 변환합니다. (예: '19 Ekim 2026')"""
    day = to_date(value)
    if day is None:
        return ""
    return f"{day.day} {TR_MONTHS[day.month - 1]} {day.year}"


def short_date(value: Optional[DateLike]) -> str:
    """tr-TR 짧은 날짜 형식으로 변환합니다. (예: '19.10.2026')"""
    day = to_date(value)
    if day is None:
        return ""
    return f"{day.day:02d}.{day.month:02d}.{day.year}"


def days_remaining(end: Optional[DateLike], now: datetime) -> int:
    """
    마감일까지 남은 일수를 올림하여 반환합니다. 이미 지났으면 0입니다.

    마감일은 해당 날짜의 자정(00:00)으로 간주합니다.
    """
    end_day = to_date(end)
    if end_day is None:
        return 0
    deadline = datetime(end_day.year, end_day.month, end_day.day, tzinfo=now.tzinfo)
    diff_days = math.ceil((deadline - now).total_seconds() / 86400)
    return diff_days if diff_days > 0 else 0
