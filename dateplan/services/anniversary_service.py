import logging
from datetime import date, timedelta
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.config import get_settings
from dateplan.database import bulk_insert
from dateplan.exceptions import (
    DetailMessage,
    InvalidInputError,
    MemberNotConnectedError,
    NoPermissionError,
    Operation,
    Resource,
)
from dateplan.models.anniversary import (
    Anniversary,
    AnniversaryCategory,
    AnniversaryPattern,
    AnniversaryRepeatRule,
)
from dateplan.models.couple import Couple
from dateplan.models.member import Member
from dateplan.utils.schedule_dates import get_next_cycle

logger = logging.getLogger(__name__)

FIRST_DATE_TITLE = "처음 만난 날"


def expand_birthday(name: str, birth_date: date, calendar_end_date: date) -> List[dict]:
    """Yearly birthdays from the birth year itself, strictly before the day
    preceding the calendar end date."""
    bound = calendar_end_date - timedelta(days=1)
    rows = []
    years = 0
    while True:
        next_date = get_next_cycle(birth_date, AnniversaryRepeatRule.YEAR, years)
        if next_date >= bound:
            break
        rows.append({"title": f"{name} 님의 생일", "content": "", "date": next_date})
        years += 1
    return rows


def expand_first_date(
    first_date: date, repeat_rule: AnniversaryRepeatRule, calendar_end_date: date
) -> List[dict]:
    bound = calendar_end_date + timedelta(days=1)

    if repeat_rule == AnniversaryRepeatRule.NONE:
        return [{"title": FIRST_DATE_TITLE, "content": "", "date": first_date}]

    rows = []
    if repeat_rule == AnniversaryRepeatRule.HUNDRED_DAYS:
        # The first-met day counts as day 1
        anchor = first_date - timedelta(days=1)
        cycle = 1
        while True:
            next_date = get_next_cycle(anchor, repeat_rule, cycle)
            if next_date >= bound:
                break
            rows.append({"title": f"만난지 {cycle * 100}일", "content": "", "date": next_date})
            cycle += 1
    elif repeat_rule == AnniversaryRepeatRule.YEAR:
        years = 1
        while True:
            next_date = get_next_cycle(first_date, repeat_rule, years)
            if next_date >= bound:
                break
            rows.append({"title": f"만난지 {years}주년", "content": "", "date": next_date})
            years += 1
    return rows


def expand_custom(
    title: str,
    content: str,
    anniversary_date: date,
    repeat_rule: AnniversaryRepeatRule,
    calendar_end_date: date,
) -> List[dict]:
    if repeat_rule == AnniversaryRepeatRule.NONE:
        return [{"title": title, "content": content, "date": anniversary_date}]

    bound = calendar_end_date + timedelta(days=1)
    rows = []
    years = 0
    while True:
        next_date = get_next_cycle(anniversary_date, repeat_rule, years)
        if next_date >= bound:
            break
        rows.append({"title": title, "content": content, "date": next_date})
        years += 1
    return rows


class AnniversaryService:
    def __init__(self, db: AsyncSession, calendar_end_date: Optional[date] = None):
        self.db = db
        self.calendar_end_date = calendar_end_date or get_settings().CALENDAR_END_DATE

    async def get_couple_by_member(self, member_id: int) -> Optional[Couple]:
        result = await self.db.execute(
            select(Couple).where(
                (Couple.member1_id == member_id) | (Couple.member2_id == member_id)
            )
        )
        return result.scalars().first()

    async def find_couple_by_member_or_raise(self, member_id: int) -> Couple:
        couple = await self.get_couple_by_member(member_id)
        if not couple:
            raise MemberNotConnectedError()
        return couple

    async def create_anniversaries_for_birthday(self, member: Member, couple: Optional[Couple] = None):
        """Materialize the member's yearly birthdays. The caller commits."""
        if couple is None:
            couple = await self.find_couple_by_member_or_raise(member.id)
        pattern = AnniversaryPattern(
            couple_id=couple.id,
            category=AnniversaryCategory.BIRTH,
            repeat_start_date=member.birth_date,
            repeat_rule=AnniversaryRepeatRule.YEAR,
        )
        rows = expand_birthday(member.name, member.birth_date, self.calendar_end_date)
        await self._materialize(pattern, rows)

    async def create_anniversaries_for_first_date(self, couple: Couple):
        """Materialize the NONE, HUNDRED_DAYS and YEAR first-met series. The caller commits."""
        for repeat_rule in AnniversaryRepeatRule:
            pattern = AnniversaryPattern(
                couple_id=couple.id,
                category=AnniversaryCategory.FIRST_DATE,
                repeat_start_date=couple.first_date,
                repeat_rule=repeat_rule,
            )
            rows = expand_first_date(couple.first_date, repeat_rule, self.calendar_end_date)
            await self._materialize(pattern, rows)

    async def create_anniversaries(
        self,
        member_id: int,
        couple_id: int,
        title: str,
        content: str,
        anniversary_date: date,
        repeat_rule: AnniversaryRepeatRule,
    ):
        couple = await self.find_couple_by_member_or_raise(member_id)
        if couple.id != couple_id:
            raise NoPermissionError(Resource.COUPLE, Operation.CREATE)
        if anniversary_date > self.calendar_end_date:
            raise InvalidInputError(DetailMessage.INVALID_CALENDER_TIME_RANGE)
        if repeat_rule == AnniversaryRepeatRule.HUNDRED_DAYS:
            raise InvalidInputError(DetailMessage.INVALID_ANNIVERSARY_REPEAT_RULE)

        pattern = AnniversaryPattern(
            couple_id=couple.id,
            category=AnniversaryCategory.OTHER,
            repeat_start_date=anniversary_date,
            repeat_rule=repeat_rule,
        )
        rows = expand_custom(title, content, anniversary_date, repeat_rule, self.calendar_end_date)
        try:
            await self._materialize(pattern, rows)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Failed to create anniversaries for couple {couple.id}: {e}")
            await self.db.rollback()
            raise
        return pattern

    async def read_coming_anniversaries(
        self, member_id: int, couple_id: int, size: int = 3, today: Optional[date] = None
    ) -> List[Anniversary]:
        couple = await self.find_couple_by_member_or_raise(member_id)
        if couple.id != couple_id:
            raise NoPermissionError(Resource.COUPLE, Operation.READ)

        today = today or date.today()
        result = await self.db.execute(
            select(Anniversary)
            .join(AnniversaryPattern)
            .where(AnniversaryPattern.couple_id == couple.id, Anniversary.date >= today)
            .order_by(Anniversary.date, Anniversary.id)
            .limit(size)
        )
        return list(result.scalars().all())

    async def _materialize(self, pattern: AnniversaryPattern, rows: List[dict]):
        # Pattern first so every row can reference its id; no commit here
        self.db.add(pattern)
        await self.db.flush()
        for row in rows:
            row["pattern_id"] = pattern.id
        await bulk_insert(self.db, Anniversary, rows)
        logger.info(
            f"Materialized {len(rows)} {pattern.category.value}/{pattern.repeat_rule.value} "
            f"anniversaries for pattern {pattern.id}"
        )
