"""
Date calculation service.
Fixes the business timezone and computes calendar-aligned boundaries
(day, week, month, quarter, year) in it.
"""
from datetime import datetime, timedelta, timezone, date, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from incentives.constants import BUSINESS_TIMEZONE

ONE_MICROSECOND = timedelta(microseconds=1)


class DateService:
    """Service for calendar boundary operations in the business timezone"""

    @staticmethod
    def get_timezone(name: Optional[str] = None) -> tzinfo:
        """
        Resolve a timezone name (defaults to the configured business timezone).

        Args:
            name: IANA timezone name, e.g. "America/Sao_Paulo"

        Returns:
            tzinfo instance
        """
        name = name or BUSINESS_TIMEZONE
        if name.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(name)

    @staticmethod
    def to_business_time(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
        """
        Convert a timestamp to the business timezone.

        Naive datetimes are stored as UTC, so they are read as UTC.
        """
        tz = tz or DateService.get_timezone()
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(tz)

    @staticmethod
    def now(tz: Optional[tzinfo] = None) -> datetime:
        """Current time in the business timezone"""
        return datetime.now(tz or DateService.get_timezone())

    @staticmethod
    def start_of_day(dt: datetime) -> datetime:
        local = DateService.to_business_time(dt)
        return datetime.combine(local.date(), datetime.min.time(), tzinfo=local.tzinfo)

    @staticmethod
    def end_of_day(dt: datetime) -> datetime:
        return DateService.start_of_day(dt) + timedelta(days=1) - ONE_MICROSECOND

    @staticmethod
    def start_of_week(dt: datetime) -> datetime:
        """Weeks start on Monday"""
        day_start = DateService.start_of_day(dt)
        return day_start - timedelta(days=day_start.weekday())

    @staticmethod
    def end_of_week(dt: datetime) -> datetime:
        return DateService.start_of_week(dt) + timedelta(days=7) - ONE_MICROSECOND

    @staticmethod
    def start_of_month(dt: datetime) -> datetime:
        return DateService.start_of_day(dt).replace(day=1)

    @staticmethod
    def end_of_month(dt: datetime) -> datetime:
        start = DateService.start_of_month(dt)
        if start.month == 12:
            next_start = start.replace(year=start.year + 1, month=1)
        else:
            next_start = start.replace(month=start.month + 1)
        return next_start - ONE_MICROSECOND

    @staticmethod
    def start_of_quarter(dt: datetime) -> datetime:
        start = DateService.start_of_month(dt)
        first_month = 3 * ((start.month - 1) // 3) + 1
        return start.replace(month=first_month)

    @staticmethod
    def end_of_quarter(dt: datetime) -> datetime:
        start = DateService.start_of_quarter(dt)
        # Last month of the quarter, then its end
        return DateService.end_of_month(start.replace(month=start.month + 2))

    @staticmethod
    def start_of_year(dt: datetime) -> datetime:
        return DateService.start_of_day(dt).replace(month=1, day=1)

    @staticmethod
    def end_of_year(dt: datetime) -> datetime:
        start = DateService.start_of_year(dt)
        return start.replace(year=start.year + 1) - ONE_MICROSECOND

    @staticmethod
    def business_date(dt: datetime) -> date:
        """Calendar date of a timestamp in the business timezone"""
        return DateService.to_business_time(dt).date()

    @staticmethod
    def get_day_range(target_date: date, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
        """
        Get datetime range for a full business day (midnight to midnight).

        Args:
            target_date: Date to get range for

        Returns:
            Tuple of (day_start, day_end) datetimes, end exclusive
        """
        tz = tz or DateService.get_timezone()
        day_start = datetime.combine(target_date, datetime.min.time(), tzinfo=tz)
        day_end = datetime.combine(target_date + timedelta(days=1), datetime.min.time(), tzinfo=tz)
        return day_start, day_end
