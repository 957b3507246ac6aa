import enum
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from dateplan.database import Base

class RepeatRule(str, enum.Enum):
    N = "N"  # none
    D = "D"  # daily
    W = "W"  # weekly
    M = "M"  # monthly
    Y = "Y"  # yearly

class SchedulePattern(Base):
    __tablename__ = "schedule_patterns"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False)
    repeat_rule = Column(Enum(RepeatRule), nullable=False)
    repeat_start_date = Column(Date, nullable=False)
    repeat_end_date = Column(Date, nullable=False)

    member = relationship("Member", back_populates="schedule_patterns")
    schedules = relationship(
        "Schedule",
        back_populates="pattern",
        cascade="all, delete-orphan",
        order_by="Schedule.start_date_time",
    )

class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        CheckConstraint("end_date_time >= start_date_time", name="ck_schedule_time_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    pattern_id = Column(
        Integer, ForeignKey("schedule_patterns.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(15), nullable=False)
    content = Column(String(100), nullable=True)
    location = Column(String(20), nullable=True)
    start_date_time = Column(DateTime, nullable=False, index=True)
    end_date_time = Column(DateTime, nullable=False, index=True)

    pattern = relationship("SchedulePattern", back_populates="schedules")
