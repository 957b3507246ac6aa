import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.exceptions import MemberNotFoundError
from dateplan.models.member import Member
from dateplan.services.anniversary_service import AnniversaryService

logger = logging.getLogger(__name__)

class MemberService:
    def __init__(self, db: AsyncSession, calendar_end_date: Optional[date] = None):
        self.db = db
        self.anniversary_service = AnniversaryService(db, calendar_end_date)

    async def create_member(self, name: str, nickname: str, birth_date: Optional[date] = None) -> Member:
        member = Member(name=name, nickname=nickname, birth_date=birth_date)
        self.db.add(member)
        await self.db.commit()
        await self.db.refresh(member)
        return member

    async def get_member(self, member_id: int) -> Optional[Member]:
        return await self.db.get(Member, member_id)

    async def get_member_or_raise(self, member_id: int) -> Member:
        member = await self.get_member(member_id)
        if not member:
            raise MemberNotFoundError()
        return member

    async def register_birth_date(self, member_id: int, birth_date: date) -> Member:
        """Store a member's birth date the first time it is given.

        A connected member gets their birthday series right away; otherwise
        the series is materialized when the couple is connected.
        """
        member = await self.get_member_or_raise(member_id)
        if member.birth_date is not None:
            logger.info(f"Member {member_id} already has a birth date; skipping")
            return member

        member.birth_date = birth_date
        try:
            couple = await self.anniversary_service.get_couple_by_member(member_id)
            if couple:
                await self.anniversary_service.create_anniversaries_for_birthday(member, couple)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Failed to register birth date for member {member_id}: {e}")
            await self.db.rollback()
            raise
        return member
