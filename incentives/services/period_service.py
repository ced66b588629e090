"""
Period interval service.
Resolves the calendar-aligned window a goal is evaluated over.
"""
from datetime import datetime, timedelta
from typing import Iterator, Optional

from incentives.constants import (
    PERIOD_DAILY, PERIOD_WEEKLY, PERIOD_MONTHLY, PERIOD_QUARTERLY, PERIOD_YEARLY,
    DAYS_PER_WEEK,
)
from incentives.exceptions import UnsupportedPeriodException
from incentives.schemas import PeriodInterval
from incentives.services.date_service import DateService

ONE_DAY = timedelta(days=1)
ONE_MICROSECOND = timedelta(microseconds=1)

_CALENDAR_BOUNDS = {
    PERIOD_DAILY: (DateService.start_of_day, DateService.end_of_day),
    PERIOD_WEEKLY: (DateService.start_of_week, DateService.end_of_week),
    PERIOD_MONTHLY: (DateService.start_of_month, DateService.end_of_month),
    PERIOD_QUARTERLY: (DateService.start_of_quarter, DateService.end_of_quarter),
    PERIOD_YEARLY: (DateService.start_of_year, DateService.end_of_year),
}


class PeriodService:
    """Service for goal period windows"""

    @staticmethod
    def calendar_interval(period: str, reference_date: datetime) -> PeriodInterval:
        """
        Get the calendar period (day, week, ...) containing reference_date.

        Raises:
            UnsupportedPeriodException: If period is not a known value
        """
        try:
            start_of, end_of = _CALENDAR_BOUNDS[period]
        except (KeyError, TypeError):
            raise UnsupportedPeriodException(period)
        return PeriodInterval(start=start_of(reference_date), end=end_of(reference_date))

    @staticmethod
    def resolve_interval(
        period: str,
        goal_created_at: datetime,
        reference_date: Optional[datetime] = None
    ) -> PeriodInterval:
        """
        Resolve the window a goal is evaluated over.

        The window is the calendar period containing reference_date. Its start
        is moved forward to the start of the creation day when the goal was
        created after the calendar start. The end is never clamped.

        Args:
            period: daily, weekly, monthly, quarterly or yearly
            goal_created_at: When the goal was created
            reference_date: Evaluation moment (defaults to now)

        Returns:
            PeriodInterval with inclusive start and end

        Raises:
            UnsupportedPeriodException: If period is not a known value
        """
        reference_date = DateService.to_business_time(reference_date or DateService.now())
        calendar = PeriodService.calendar_interval(period, reference_date)

        created_at = DateService.to_business_time(goal_created_at)
        start = calendar.start
        if created_at > calendar.start:
            start = DateService.start_of_day(created_at)

        return PeriodInterval(start=start, end=calendar.end)

    @staticmethod
    def days_between(start: datetime, end: datetime) -> int:
        """Inclusive day count of [start, end]"""
        return (end - start) // ONE_DAY + 1

    @staticmethod
    def days_in_period(
        period: str,
        goal_created_at: datetime,
        reference_date: Optional[datetime] = None
    ) -> int:
        """Inclusive day count of the resolved (clamped) window"""
        interval = PeriodService.resolve_interval(period, goal_created_at, reference_date)
        return PeriodService.days_between(interval.start, interval.end)

    @staticmethod
    def calendar_days(period: str, reference_date: datetime) -> int:
        """
        Day count of the unclamped calendar period used for per-day payout rates.

        Daily goals spread their value over the current month, weekly goals
        over 7 days, the rest over the days of their calendar period.
        """
        if period == PERIOD_DAILY:
            interval = PeriodService.calendar_interval(PERIOD_MONTHLY, reference_date)
        elif period == PERIOD_WEEKLY:
            return DAYS_PER_WEEK
        else:
            interval = PeriodService.calendar_interval(period, reference_date)
        return PeriodService.days_between(interval.start, interval.end)

    @staticmethod
    def periods_overlap(first: PeriodInterval, second: PeriodInterval) -> bool:
        return first.start <= second.end and first.end >= second.start

    @staticmethod
    def intervals_within(
        period: str,
        goal_created_at: datetime,
        range_start: datetime,
        range_end: datetime
    ) -> Iterator[PeriodInterval]:
        """
        Yield every resolved window of a goal that overlaps [range_start, range_end].

        Windows that close before the goal's creation day are skipped. Windows
        are yielded whole, so the first and last may extend past the range.
        """
        created_day = DateService.start_of_day(goal_created_at)
        cursor = DateService.to_business_time(range_start)
        range_end = DateService.to_business_time(range_end)

        while cursor <= range_end:
            interval = PeriodService.resolve_interval(period, goal_created_at, cursor)
            if interval.end >= created_day:
                yield interval
            cursor = interval.end + ONE_MICROSECOND

    @staticmethod
    def next_period_reset(
        period: str,
        goal_created_at: datetime,
        reference_date: Optional[datetime] = None
    ) -> datetime:
        """When the current window closes"""
        return PeriodService.resolve_interval(period, goal_created_at, reference_date).end

    @staticmethod
    def is_period_active(
        period: str,
        goal_created_at: datetime,
        reference_date: Optional[datetime] = None
    ) -> bool:
        """True while reference_date has not passed the window end"""
        reference_date = DateService.to_business_time(reference_date or DateService.now())
        interval = PeriodService.resolve_interval(period, goal_created_at, reference_date)
        return reference_date <= interval.end
