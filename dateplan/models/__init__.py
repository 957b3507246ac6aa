from dateplan.models.member import Member
from dateplan.models.couple import Couple
from dateplan.models.anniversary import (
    Anniversary,
    AnniversaryCategory,
    AnniversaryPattern,
    AnniversaryRepeatRule,
)
from dateplan.models.schedule import RepeatRule, Schedule, SchedulePattern

__all__ = [
    "Member",
    "Couple",
    "Anniversary",
    "AnniversaryCategory",
    "AnniversaryPattern",
    "AnniversaryRepeatRule",
    "RepeatRule",
    "Schedule",
    "SchedulePattern",
]
