from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.database import get_db
from dateplan.dependencies import get_current_member
from dateplan.models.member import Member
from dateplan.schemas import AnniversaryCreateRequest, ComingAnniversaryResponse
from dateplan.services.anniversary_service import AnniversaryService

router = APIRouter(prefix="/api/couples", tags=["anniversaries"])


@router.post("/{couple_id}/anniversary", status_code=status.HTTP_201_CREATED)
async def create_anniversary(
    couple_id: int,
    request: AnniversaryCreateRequest,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    await AnniversaryService(db).create_anniversaries(
        member.id,
        couple_id,
        title=request.title,
        content=request.content,
        anniversary_date=request.date,
        repeat_rule=request.repeat_rule,
    )
    return {"success": True}


@router.get("/{couple_id}/anniversary/coming")
async def read_coming_anniversaries(
    couple_id: int,
    size: int = Query(3, ge=1, le=50),
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    anniversaries = await AnniversaryService(db).read_coming_anniversaries(
        member.id, couple_id, size
    )
    data = [
        ComingAnniversaryResponse.model_validate(a).model_dump(mode="json", by_alias=True)
        for a in anniversaries
    ]
    return {"success": True, "data": {"anniversaries": data}}
