import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.exceptions import (
    AlreadyConnectedError,
    DetailMessage,
    InvalidInputError,
    SelfConnectionNotAllowedError,
)
from dateplan.models.couple import Couple
from dateplan.services.anniversary_service import AnniversaryService
from dateplan.services.member_service import MemberService

logger = logging.getLogger(__name__)

class CoupleService:
    def __init__(self, db: AsyncSession, calendar_end_date: Optional[date] = None):
        self.db = db
        self.member_service = MemberService(db, calendar_end_date)
        self.anniversary_service = AnniversaryService(db, calendar_end_date)

    async def get_couple(self, member_id: int) -> Optional[Couple]:
        return await self.anniversary_service.get_couple_by_member(member_id)

    async def get_partner_id(self, member_id: int) -> Optional[int]:
        couple = await self.get_couple(member_id)
        if not couple:
            return None
        return couple.partner_id_of(member_id)

    async def connect_couple(self, member_id: int, partner_id: int, first_date: date) -> Couple:
        """Connect two members and materialize their anniversaries.

        The couple row, the first-met series and both birthday series are
        committed together or not at all.
        """
        if member_id == partner_id:
            raise SelfConnectionNotAllowedError()
        if first_date > self.anniversary_service.calendar_end_date:
            raise InvalidInputError(DetailMessage.INVALID_CALENDER_TIME_RANGE)

        member = await self.member_service.get_member_or_raise(member_id)
        partner = await self.member_service.get_member_or_raise(partner_id)
        if await self.get_couple(member_id) or await self.get_couple(partner_id):
            raise AlreadyConnectedError()

        couple = Couple(member1_id=member.id, member2_id=partner.id, first_date=first_date)
        self.db.add(couple)
        try:
            await self.db.flush()
            await self.anniversary_service.create_anniversaries_for_first_date(couple)
            for m in (member, partner):
                if m.birth_date is not None:
                    await self.anniversary_service.create_anniversaries_for_birthday(m, couple)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Failed to connect members {member_id} and {partner_id}: {e}")
            await self.db.rollback()
            raise

        logger.info(f"Connected couple {couple.id} ({member_id}, {partner_id})")
        return couple
