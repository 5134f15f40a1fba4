import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class ReportRange:
    """Query window for one report.

    ``start`` is inclusive and ``end`` exclusive. Both are None in all-time
    mode, in which case ``year``/``month`` only echo what the caller had
    selected for navigation purposes.
    """

    year: int
    month: int
    all_time: bool = False
    start: datetime | None = None
    end: datetime | None = None

    @property
    def bounded(self) -> bool:
        return not self.all_time

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def days(self) -> list[date]:
        if self.all_time:
            return []
        first = date(self.year, self.month, 1)
        return [first + timedelta(days=i) for i in range(self.days_in_month)]


def resolve_range(year: int, month: int, *, all_time: bool = False) -> ReportRange:
    if all_time:
        return ReportRange(year=year, month=month, all_time=True)
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return ReportRange(year=year, month=month, start=start, end=end)


def default_selection(now: datetime) -> tuple[int, int]:
    return now.year, now.month


def is_current_month(year: int, month: int, now: datetime) -> bool:
    return year == now.year and month == now.month


def is_future_month(year: int, month: int, now: datetime) -> bool:
    return (year, month) > (now.year, now.month)


def shift_month(year: int, month: int, step: int, now: datetime) -> tuple[int, int] | None:
    """Move ``step`` months from the given one.

    Returns None when the target lies after ``now``'s month; the dashboard
    never navigates into the future.
    """
    index = year * 12 + (month - 1) + step
    target = (index // 12, index % 12 + 1)
    if is_future_month(target[0], target[1], now):
        return None
    return target


def recent_months(now: datetime, count: int = 12) -> list[tuple[int, int]]:
    months = []
    for i in range(count):
        index = now.year * 12 + (now.month - 1) - i
        months.append((index // 12, index % 12 + 1))
    return months
