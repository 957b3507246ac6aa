from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.database import get_db
from dateplan.models.member import Member
from dateplan.services.member_service import MemberService


async def get_current_member(
    x_member_id: int = Header(..., alias="X-Member-Id"),
    db: AsyncSession = Depends(get_db),
) -> Member:
    # Authentication happens upstream; it forwards the member id in this header
    return await MemberService(db).get_member_or_raise(x_member_id)
