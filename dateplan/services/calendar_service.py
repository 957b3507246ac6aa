import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple
from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.exceptions import NoPermissionError, Operation, Resource
from dateplan.models.schedule import Schedule, SchedulePattern
from dateplan.services.couple_service import CoupleService
from dateplan.utils.schedule_dates import iter_days

logger = logging.getLogger(__name__)


def in_window(day: date, year: Optional[int], month: Optional[int]) -> bool:
    if year is not None and day.year != year:
        return False
    if month is not None and day.month != month:
        return False
    return True


def window_bounds(year: Optional[int], month: Optional[int]) -> Optional[Tuple[datetime, datetime]]:
    """Half-open datetime range a (year, month) filter can be narrowed to in SQL.

    A month without a year matches that month in every year, so it cannot be
    expressed as a single range and returns None.
    """
    if year is None:
        return None
    if month is None:
        start = datetime(year, 1, 1)
        return start, start + relativedelta(years=1)
    start = datetime(year, month, 1)
    return start, start + relativedelta(months=1)


def collect_schedule_dates(
    schedules: Iterable[Schedule], year: Optional[int] = None, month: Optional[int] = None
) -> List[date]:
    """Every date covered by the schedules that falls in the window, sorted."""
    dates = set()
    for schedule in schedules:
        for day in iter_days(schedule.start_date_time.date(), schedule.end_date_time.date()):
            if in_window(day, year, month):
                dates.add(day)
    return sorted(dates)


class CalendarService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.couple_service = CoupleService(db)

    async def find_by_year_and_month(
        self, member_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> List[Schedule]:
        stmt = (
            select(Schedule)
            .join(SchedulePattern)
            .where(SchedulePattern.member_id == member_id)
        )
        bounds = window_bounds(year, month)
        if bounds:
            window_start, window_end = bounds
            stmt = stmt.where(
                Schedule.start_date_time < window_end,
                Schedule.end_date_time >= window_start,
            )
        result = await self.db.execute(stmt.order_by(Schedule.start_date_time))
        return list(result.scalars().all())

    async def read_schedule(
        self,
        member_id: int,
        requesting_member_id: int,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[date]:
        partner_id = await self.couple_service.get_partner_id(requesting_member_id)
        if member_id not in (requesting_member_id, partner_id):
            logger.warning(
                f"Member {requesting_member_id} tried to read schedules of member {member_id}"
            )
            raise NoPermissionError(Resource.MEMBER, Operation.READ)

        schedules = await self.find_by_year_and_month(member_id, year, month)
        return collect_schedule_dates(schedules, year, month)
