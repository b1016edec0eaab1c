# club_admin/utils/records.py
from datetime import date, datetime
from typing import Any, Dict, Iterable

from sqlalchemy import Boolean, Date, DateTime, Integer, inspect

READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def record_to_dict(record: Any) -> Dict[str, Any]:
    """ORM 레코드를 JSON 직렬화 가능한 딕셔너리로 변환합니다. 날짜는 ISO 문자열이 됩니다."""
    result = {}
    for column in inspect(record).mapper.column_attrs:
        value = getattr(record, column.key)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        result[column.key] = value
    return result


def writable_fields(model_cls) -> Iterable[str]:
    return [c.key for c in inspect(model_cls).column_attrs if c.key not in READ_ONLY_FIELDS]


def coerce_fields(model_cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    요청 본문의 값을 모델 컬럼 타입에 맞게 변환합니다.

    Args:
        model_cls: 대상 SQLAlchemy 모델 클래스.
        data: 클라이언트가 보낸 필드와 값.

    Returns:
        컬럼 타입으로 변환된 새 딕셔너리.

    Raises:
        ValueError: 알 수 없는 필드, 읽기 전용 필드, 또는 변환할 수 없는 값이 있을 때.
    """
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object.")

    columns = {c.key: c.columns[0] for c in inspect(model_cls).column_attrs}
    coerced = {}
    for key, value in data.items():
        if key in READ_ONLY_FIELDS:
            raise ValueError(f"Field '{key}' is read-only.")
        column = columns.get(key)
        if column is None:
            raise ValueError(f"Unknown field '{key}' for '{model_cls.__tablename__}'.")
        coerced[key] = _coerce_value(key, column.type, value)
    return coerced


def _coerce_value(key: str, column_type, value: Any) -> Any:
    if value is None:
        return None
    try:
        if isinstance(column_type, Boolean):
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
                return value.strip().lower() in _TRUE_STRINGS
            if isinstance(value, int):
                return bool(value)
            raise ValueError(value)
        if isinstance(column_type, Integer):
            if isinstance(value, bool):
                raise ValueError(value)
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            return int(value)
        if isinstance(column_type, DateTime):
            if isinstance(value, datetime):
                return value
            text = str(value).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text) if text else None
        if isinstance(column_type, Date):
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            text = str(value).strip()
            return date.fromisoformat(text[:10]) if text else None
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for field '{key}': {value!r}")
    return value
