"""
Request and response bodies of the HTTP API.

Fields are exposed in camelCase (``startDateTime``) and validated with the
client-facing messages from ``DetailMessage``.
"""
import re
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from dateplan.exceptions import DetailMessage
from dateplan.models.anniversary import AnniversaryRepeatRule
from dateplan.models.schedule import RepeatRule

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScheduleUpdateRequest(CamelModel):
    title: str
    start_date_time: datetime
    end_date_time: datetime
    location: Optional[str] = None
    content: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        if not 1 <= len(v) <= 15:
            raise ValueError(DetailMessage.INVALID_SCHEDULE_TITLE)
        return v

    @field_validator("location")
    @classmethod
    def check_location(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 20:
            raise ValueError(DetailMessage.INVALID_SCHEDULE_LOCATION)
        return v

    @field_validator("content")
    @classmethod
    def check_content(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 100:
            raise ValueError(DetailMessage.INVALID_SCHEDULE_CONTENT)
        return v

    @model_validator(mode="after")
    def check_time_range(self):
        if (self.start_date_time.tzinfo is None) != (self.end_date_time.tzinfo is None):
            raise ValueError(DetailMessage.INVALID_INPUT_VALUE)
        if self.end_date_time < self.start_date_time:
            raise ValueError(DetailMessage.INVALID_DATE_TIME_RANGE)
        return self


class ScheduleRequest(ScheduleUpdateRequest):
    repeat_rule: RepeatRule
    repeat_end_time: Optional[datetime] = None

    @field_validator("repeat_rule", mode="before")
    @classmethod
    def check_repeat_rule(cls, v: Any) -> Any:
        if v not in [rule.value for rule in RepeatRule]:
            raise ValueError(DetailMessage.INVALID_REPEAT_RULE)
        return v


class ScheduleDatesResponse(CamelModel):
    schedule_dates: List[date]


class AnniversaryCreateRequest(CamelModel):
    title: str
    content: str = ""
    date: date
    repeat_rule: AnniversaryRepeatRule

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> Any:
        if not isinstance(v, str) or not 2 <= len(v) <= 15:
            raise ValueError(DetailMessage.INVALID_ANNIVERSARY_TITLE)
        return v

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v: Any) -> Any:
        if v is None:
            return ""
        if not isinstance(v, str) or len(v) > 100:
            raise ValueError(DetailMessage.INVALID_ANNIVERSARY_CONTENT)
        return v

    @field_validator("date", mode="before")
    @classmethod
    def check_date_pattern(cls, v: Any) -> Any:
        if isinstance(v, date):
            return v
        if not isinstance(v, str) or not DATE_PATTERN.match(v):
            raise ValueError(DetailMessage.INVALID_DATE_PATTERN)
        return v

    @field_validator("repeat_rule", mode="before")
    @classmethod
    def check_repeat_rule(cls, v: Any) -> Any:
        if v not in (AnniversaryRepeatRule.NONE.value, AnniversaryRepeatRule.YEAR.value):
            raise ValueError(DetailMessage.INVALID_ANNIVERSARY_REPEAT_RULE)
        return v


class ComingAnniversaryResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    date: date
