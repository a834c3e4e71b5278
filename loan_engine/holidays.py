"""
Holiday Calendar Module

Canadian statutory holidays for a range of years and advisory flags for due
dates that land on one. Dates are never shifted here; a flagged date is
re-picked by a person through the normal modification path.
"""

from datetime import date, timedelta
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .logging_config import get_logger


logger = get_logger("loan_engine.holidays")

MONDAY = 0


@dataclass(frozen=True)
class Holiday:
    """A named holiday"""
    date: date
    name: str


@dataclass(frozen=True)
class HolidayWarning:
    """A due date that coincides with a holiday"""
    due_date: date
    holiday: Holiday
    
    @property
    def message(self) -> str:
        return f"Payment due {self.due_date.isoformat()} falls on {self.holiday.name}"


def easter_date(year: int) -> date:
    """Easter Sunday for ``year`` (anonymous Gregorian Computus)"""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = (h + l - 7 * m + 114) % 31 + 1
    return date(year, month, day)


def _first_monday_on_or_after(value: date) -> date:
    return value + timedelta(days=(MONDAY - value.weekday()) % 7)


def _last_monday_on_or_before(value: date) -> date:
    return value - timedelta(days=(value.weekday() - MONDAY) % 7)


def holidays_for_year(year: int) -> List[Holiday]:
    """Statutory holidays and common observances for one year"""
    easter = easter_date(year)
    return [
        Holiday(date(year, 1, 1), "New Year's Day"),
        Holiday(easter - timedelta(days=2), "Good Friday"),
        Holiday(easter + timedelta(days=1), "Easter Monday"),
        Holiday(_last_monday_on_or_before(date(year, 5, 24)), "Victoria Day"),
        Holiday(date(year, 7, 1), "Canada Day"),
        Holiday(_first_monday_on_or_after(date(year, 9, 1)), "Labour Day"),
        Holiday(_first_monday_on_or_after(date(year, 10, 8)), "Thanksgiving"),
        Holiday(date(year, 11, 11), "Remembrance Day"),
        Holiday(date(year, 12, 25), "Christmas"),
        Holiday(date(year, 12, 26), "Boxing Day")
    ]


def holidays_between(start_year: int, end_year: int) -> List[Holiday]:
    """Holidays for every year from ``start_year`` to ``end_year`` inclusive"""
    holidays = []
    for year in range(start_year, end_year + 1):
        holidays.extend(holidays_for_year(year))
    return holidays


def holidays_for_dates(dates: Iterable[date]) -> List[Holiday]:
    """Holidays covering the years spanned by ``dates``"""
    years = [value.year for value in dates]
    if not years:
        return []
    return holidays_between(min(years), max(years))


def upcoming_holidays(today: date) -> List[Holiday]:
    """Holidays for the current year and the configured number of years ahead"""
    from .config import get_config
    
    return holidays_between(today.year, today.year + get_config().holiday_years_ahead)


def find_holiday(due_date: date, holidays: Sequence[Holiday]) -> Optional[Holiday]:
    """Holiday falling on ``due_date``, if any"""
    for holiday in holidays:
        if holiday.date == due_date:
            return holiday
    return None


def flag_holidays(items: Sequence, holidays: Optional[Sequence[Holiday]] = None) -> List[HolidayWarning]:
    """
    Flag scheduled payments whose due date is a holiday
    
    Args:
        items: Schedule items or payment records (anything with ``due_date``
            or ``payment_date``)
        holidays: Precomputed holidays; derived from the items' years when omitted
        
    Returns:
        One HolidayWarning per flagged item, in schedule order
    """
    due_dates = [getattr(item, 'due_date', None) or getattr(item, 'payment_date') for item in items]
    if holidays is None:
        holidays = holidays_for_dates(due_dates)
    
    warnings = []
    for due_date in due_dates:
        holiday = find_holiday(due_date, holidays)
        if holiday:
            warning = HolidayWarning(due_date=due_date, holiday=holiday)
            logger.warning(warning.message)
            warnings.append(warning)
    return warnings
