#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Date Window
Окно дат аналитики: [today - days, today] с границами в полночь

Оба режима описывают один и тот же набор календарных дней:
  - INCLUSIVE  [start, end], end = полночь сегодняшнего дня
  - HALF_OPEN  [start, end), end = полночь завтрашнего дня
Хранилище всегда получает дни first_day..last_day включительно.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterator, Optional, Union

from dashboard.core.exceptions import InvalidInput
from utils.datetime_utils import DEFAULT_TZ, localize, midnight, now_in
from utils.validators import is_non_negative_int

logger = logging.getLogger(__name__)


class WindowMode(str, Enum):
    INCLUSIVE = "inclusive"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class DateWindow:
    start: datetime
    end: datetime
    mode: WindowMode = WindowMode.INCLUSIVE
    tz_name: str = DEFAULT_TZ

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        if self.mode == WindowMode.HALF_OPEN:
            return self.end.date() - timedelta(days=1)
        return self.end.date()

    @property
    def day_count(self) -> int:
        return (self.last_day - self.first_day).days + 1

    def days(self) -> Iterator[date]:
        """Все календарные дни окна по возрастанию"""
        day = self.first_day
        while day <= self.last_day:
            yield day
            day += timedelta(days=1)

    def contains(self, moment: Union[date, datetime]) -> bool:
        if not isinstance(moment, datetime):
            return self.first_day <= moment <= self.last_day
        moment = localize(moment, self.tz_name)
        if self.mode == WindowMode.HALF_OPEN:
            return self.start <= moment < self.end
        # Включительный режим сравнивает дни, приведённые к полуночи
        return self.start <= midnight(moment.date(), self.tz_name) <= self.end


def parse_days(value: Any, max_days: Optional[int] = None) -> int:
    """
    Разобрать параметр days: неотрицательное целое, числом или строкой.
    Любое другое значение - InvalidInput до обращения к хранилищу.
    """
    if value is None:
        raise InvalidInput("Параметр days обязателен")
    if isinstance(value, bool):
        raise InvalidInput(f"days должен быть целым числом, получено: {value!r}")

    if isinstance(value, int):
        days = value
    elif isinstance(value, float) and value.is_integer():
        days = int(value)
    elif isinstance(value, str) and is_non_negative_int(value):
        try:
            days = int(value.strip())
        except ValueError:
            # Строка длиннее предела int() для десятичных цифр
            raise InvalidInput(f"days слишком велико: {len(value.strip())} цифр")
    else:
        raise InvalidInput(f"days должен быть неотрицательным целым числом, получено: {value!r}")

    if days < 0:
        raise InvalidInput("days должен быть неотрицательным")
    if max_days is not None and days > max_days:
        raise InvalidInput(f"days не может превышать {max_days}")
    return days


def resolve_window(
    days: Any,
    now: Optional[datetime] = None,
    mode: WindowMode = WindowMode.INCLUSIVE,
    tz_name: str = DEFAULT_TZ,
    max_days: Optional[int] = None,
) -> DateWindow:
    """Окно из days дней назад до сегодня в таймзоне tz_name"""
    count = parse_days(days, max_days)
    now = localize(now, tz_name) if now is not None else now_in(tz_name)
    today = now.date()

    try:
        start = midnight(today - timedelta(days=count), tz_name)
    except OverflowError:
        raise InvalidInput("Окно выходит за пределы календаря")
    if mode == WindowMode.HALF_OPEN:
        end = midnight(today + timedelta(days=1), tz_name)
    else:
        end = midnight(today, tz_name)

    window = DateWindow(start=start, end=end, mode=mode, tz_name=tz_name)
    logger.debug(f"🗓️ Окно {window.first_day}..{window.last_day} ({mode.value}, {tz_name})")
    return window
