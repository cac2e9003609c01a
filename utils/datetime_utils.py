from datetime import date, datetime, time
from typing import Union

import pytz

DEFAULT_TZ = "UTC"

DateLike = Union[date, datetime, str]


def get_tz(tz_name: str = DEFAULT_TZ):
    return pytz.timezone(tz_name)


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def now_in(tz_name: str = DEFAULT_TZ) -> datetime:
    return datetime.now(get_tz(tz_name))


def today_in(tz_name: str = DEFAULT_TZ) -> date:
    return now_in(tz_name).date()


def localize(moment: datetime, tz_name: str = DEFAULT_TZ) -> datetime:
    """Naive datetime считается временем в tz_name, aware переводится в tz_name"""
    tz = get_tz(tz_name)
    if moment.tzinfo is None:
        return tz.localize(moment)
    return moment.astimezone(tz)


def midnight(day: date, tz_name: str = DEFAULT_TZ) -> datetime:
    return get_tz(tz_name).localize(datetime.combine(day, time.min))


def parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip().replace('Z', '+00:00'))


def to_calendar_day(value: DateLike, tz_name: str = DEFAULT_TZ) -> date:
    """Привести дату/время/ISO-строку к календарному дню в tz_name"""
    if isinstance(value, datetime):
        return localize(value, tz_name).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return localize(parse_datetime(text), tz_name).date()
    raise TypeError(f"Unsupported date value: {value!r}")


def ensure_utc(moment: datetime) -> datetime:
    """SQLite теряет tzinfo; сохранённые моменты всегда в UTC"""
    if moment.tzinfo is None:
        return pytz.utc.localize(moment)
    return moment.astimezone(pytz.utc)
