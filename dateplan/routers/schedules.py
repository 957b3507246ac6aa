from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from dateplan.database import get_db
from dateplan.dependencies import get_current_member
from dateplan.models.member import Member
from dateplan.schemas import ScheduleDatesResponse, ScheduleRequest, ScheduleUpdateRequest
from dateplan.services.calendar_service import CalendarService
from dateplan.services.schedule_service import ScheduleService

router = APIRouter(prefix="/api/schedules", tags=["schedules"])


@router.post("/{member_id}", status_code=status.HTTP_201_CREATED)
async def create_schedule(
    member_id: int,
    request: ScheduleRequest,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    await ScheduleService(db).create_schedule(
        member_id,
        member.id,
        title=request.title,
        start_date_time=request.start_date_time,
        end_date_time=request.end_date_time,
        repeat_rule=request.repeat_rule,
        repeat_end_time=request.repeat_end_time,
        content=request.content,
        location=request.location,
    )
    return {"success": True}


@router.get("/{member_id}")
async def read_schedule(
    member_id: int,
    year: Optional[int] = Query(None, ge=1, le=9998),
    month: Optional[int] = Query(None, ge=1, le=12),
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    dates = await CalendarService(db).read_schedule(member_id, member.id, year, month)
    data = ScheduleDatesResponse(schedule_dates=dates)
    return {"success": True, "data": data.model_dump(mode="json", by_alias=True)}


@router.put("/{member_id}/{schedule_id}")
async def update_schedule(
    member_id: int,
    schedule_id: int,
    request: ScheduleUpdateRequest,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    await ScheduleService(db).update_schedule(
        member_id,
        schedule_id,
        member.id,
        title=request.title,
        start_date_time=request.start_date_time,
        end_date_time=request.end_date_time,
        content=request.content,
        location=request.location,
    )
    return {"success": True}
