import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.config import get_settings
from dateplan.database import bulk_insert
from dateplan.exceptions import (
    DetailMessage,
    InvalidDateTimeRangeError,
    InvalidInputError,
    NoPermissionError,
    Operation,
    Resource,
    ScheduleNotFoundError,
)
from dateplan.models.schedule import RepeatRule, Schedule, SchedulePattern
from dateplan.utils.schedule_dates import get_next_cycle, is_repeating

logger = logging.getLogger(__name__)


def validate_time_range(start_date_time: datetime, end_date_time: datetime):
    # Naive and offset-aware datetimes cannot be compared
    if (start_date_time.tzinfo is None) != (end_date_time.tzinfo is None):
        raise InvalidInputError()
    if end_date_time < start_date_time:
        raise InvalidDateTimeRangeError()


def expand_schedule(
    title: str,
    content: Optional[str],
    location: Optional[str],
    start_date_time: datetime,
    end_date_time: datetime,
    repeat_rule: RepeatRule,
    repeat_end_date: Optional[date] = None,
) -> List[dict]:
    """Expand a schedule definition into one row per occurrence.

    Only the start advances by the cycle; each end is the new start plus the
    original duration, so month-end clamping never shortens an occurrence or
    puts its end before its start. Expansion stops at the first occurrence whose start
    date is after ``repeat_end_date``; the last kept occurrence may still end
    after it. A non-repeating rule always yields exactly one row.
    """
    validate_time_range(start_date_time, end_date_time)

    if not is_repeating(repeat_rule):
        return [{
            "title": title,
            "content": content,
            "location": location,
            "start_date_time": start_date_time,
            "end_date_time": end_date_time,
        }]

    if repeat_end_date is None:
        raise InvalidInputError(DetailMessage.INVALID_REPEAT_END_TIME)

    duration = end_date_time - start_date_time
    rows = []
    cycle = 0
    while True:
        next_start = get_next_cycle(start_date_time, repeat_rule, cycle)
        if next_start.date() > repeat_end_date:
            break
        rows.append({
            "title": title,
            "content": content,
            "location": location,
            "start_date_time": next_start,
            "end_date_time": next_start + duration,
        })
        cycle += 1
    return rows


class ScheduleService:
    def __init__(self, db: AsyncSession, calendar_end_date: Optional[date] = None):
        self.db = db
        self.calendar_end_date = calendar_end_date or get_settings().CALENDAR_END_DATE

    async def create_schedule(
        self,
        member_id: int,
        requesting_member_id: int,
        title: str,
        start_date_time: datetime,
        end_date_time: datetime,
        repeat_rule: RepeatRule,
        repeat_end_time: Optional[datetime] = None,
        content: Optional[str] = None,
        location: Optional[str] = None,
    ) -> SchedulePattern:
        if member_id != requesting_member_id:
            raise NoPermissionError(Resource.MEMBER, Operation.CREATE)
        validate_time_range(start_date_time, end_date_time)
        if start_date_time.date() > self.calendar_end_date:
            raise InvalidInputError(DetailMessage.INVALID_CALENDER_TIME_RANGE)

        start_date = start_date_time.date()
        if is_repeating(repeat_rule):
            if repeat_end_time is None or repeat_end_time.date() < start_date:
                raise InvalidInputError(DetailMessage.INVALID_REPEAT_END_TIME)
            repeat_end_date = min(repeat_end_time.date(), self.calendar_end_date)
        else:
            repeat_end_date = start_date

        rows = expand_schedule(
            title,
            content,
            location,
            start_date_time,
            end_date_time,
            repeat_rule,
            repeat_end_date,
        )

        pattern = SchedulePattern(
            member_id=member_id,
            repeat_rule=repeat_rule,
            repeat_start_date=start_date,
            repeat_end_date=repeat_end_date,
        )
        try:
            self.db.add(pattern)
            await self.db.flush()
            for row in rows:
                row["pattern_id"] = pattern.id
            await bulk_insert(self.db, Schedule, rows)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Failed to create schedules for member {member_id}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"Materialized {len(rows)} {repeat_rule.value} schedules for pattern {pattern.id}"
        )
        return pattern

    async def get_schedules_by_pattern(self, pattern_id: int) -> List[Schedule]:
        result = await self.db.execute(
            select(Schedule)
            .where(Schedule.pattern_id == pattern_id)
            .order_by(Schedule.start_date_time)
        )
        return list(result.scalars().all())

    async def update_schedule(
        self,
        member_id: int,
        schedule_id: int,
        requesting_member_id: int,
        title: str,
        start_date_time: datetime,
        end_date_time: datetime,
        content: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Schedule:
        # Edits a single occurrence; the rest of the series is left as is
        if member_id != requesting_member_id:
            raise NoPermissionError(Resource.MEMBER, Operation.UPDATE)
        validate_time_range(start_date_time, end_date_time)
        if start_date_time.date() > self.calendar_end_date:
            raise InvalidInputError(DetailMessage.INVALID_CALENDER_TIME_RANGE)

        result = await self.db.execute(
            select(Schedule)
            .join(SchedulePattern)
            .where(Schedule.id == schedule_id, SchedulePattern.member_id == member_id)
        )
        schedule = result.scalars().first()
        if not schedule:
            raise ScheduleNotFoundError()

        schedule.title = title
        schedule.content = content
        schedule.location = location
        schedule.start_date_time = start_date_time
        schedule.end_date_time = end_date_time
        await self.db.commit()
        await self.db.refresh(schedule)
        return schedule
