from datetime import date, datetime

import pytest

from dateplan.exceptions import NoPermissionError
from dateplan.models.schedule import RepeatRule, Schedule
from dateplan.services.calendar_service import (
    CalendarService,
    collect_schedule_dates,
    window_bounds,
)
from dateplan.services.schedule_service import ScheduleService


def make_schedule(start, end):
    return Schedule(title="일정", start_date_time=start, end_date_time=end)


OVERNIGHT = make_schedule(datetime(2024, 3, 30, 23, 0), datetime(2024, 4, 1, 1, 0))


def test_multi_day_schedule_filtered_by_month():
    assert collect_schedule_dates([OVERNIGHT], 2024, 3) == [date(2024, 3, 30), date(2024, 3, 31)]
    assert collect_schedule_dates([OVERNIGHT], 2024, 4) == [date(2024, 4, 1)]


def test_unfiltered_query_covers_whole_span():
    assert collect_schedule_dates([OVERNIGHT]) == [
        date(2024, 3, 30),
        date(2024, 3, 31),
        date(2024, 4, 1),
    ]


def test_year_only_and_month_only_filters():
    schedules = [
        make_schedule(datetime(2023, 12, 31, 22, 0), datetime(2024, 1, 1, 2, 0)),
        make_schedule(datetime(2025, 1, 5, 9, 0), datetime(2025, 1, 5, 10, 0)),
    ]

    assert collect_schedule_dates(schedules, year=2024) == [date(2024, 1, 1)]
    assert collect_schedule_dates(schedules, month=1) == [date(2024, 1, 1), date(2025, 1, 5)]
    assert collect_schedule_dates(schedules, year=2023) == [date(2023, 12, 31)]


def test_overlapping_schedules_are_deduplicated_and_sorted():
    schedules = [
        make_schedule(datetime(2024, 5, 3, 9, 0), datetime(2024, 5, 4, 9, 0)),
        make_schedule(datetime(2024, 5, 1, 9, 0), datetime(2024, 5, 3, 9, 0)),
    ]
    assert collect_schedule_dates(schedules, 2024, 5) == [
        date(2024, 5, 1),
        date(2024, 5, 2),
        date(2024, 5, 3),
        date(2024, 5, 4),
    ]


def test_window_bounds():
    assert window_bounds(None, None) is None
    assert window_bounds(None, 3) is None
    assert window_bounds(2024, None) == (datetime(2024, 1, 1), datetime(2025, 1, 1))
    assert window_bounds(2024, 12) == (datetime(2024, 12, 1), datetime(2025, 1, 1))


async def create_overnight_schedule(db, member):
    await ScheduleService(db).create_schedule(
        member.id,
        member.id,
        title="야간 산행",
        start_date_time=datetime(2024, 3, 30, 23, 0),
        end_date_time=datetime(2024, 4, 1, 1, 0),
        repeat_rule=RepeatRule.N,
    )


@pytest.mark.asyncio
async def test_member_and_partner_can_read_calendar(db, members):
    a, b = members["a"], members["b"]
    await create_overnight_schedule(db, a)
    service = CalendarService(db)

    as_self = await service.read_schedule(a.id, a.id, 2024, 3)
    as_partner = await service.read_schedule(a.id, b.id, 2024, 3)

    assert as_self == [date(2024, 3, 30), date(2024, 3, 31)]
    assert as_partner == as_self
    assert await service.read_schedule(a.id, a.id, 2024, 4) == [date(2024, 4, 1)]


@pytest.mark.asyncio
async def test_unrelated_member_cannot_read_calendar(db, members):
    a, c = members["a"], members["c"]
    await create_overnight_schedule(db, a)

    with pytest.raises(NoPermissionError):
        await CalendarService(db).read_schedule(a.id, c.id)


@pytest.mark.asyncio
async def test_unconnected_member_cannot_read_other_calendar(db, members):
    # c has no couple, so only c's own calendar is visible to c
    a, c = members["a"], members["c"]
    service = CalendarService(db)

    assert await service.read_schedule(c.id, c.id) == []
    with pytest.raises(NoPermissionError):
        await service.read_schedule(a.id, c.id, 2024, 3)


@pytest.mark.asyncio
async def test_store_query_keeps_schedules_crossing_window_edges(db, members):
    a = members["a"]
    await create_overnight_schedule(db, a)
    service = CalendarService(db)

    assert len(await service.find_by_year_and_month(a.id, 2024, 4)) == 1
    assert len(await service.find_by_year_and_month(a.id, 2024, 3)) == 1
    assert await service.find_by_year_and_month(a.id, 2024, 5) == []
    assert await service.find_by_year_and_month(a.id, 2023) == []
