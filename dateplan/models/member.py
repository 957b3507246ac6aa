from sqlalchemy import Column, Integer, String, Date
from sqlalchemy.orm import relationship
from dateplan.database import Base

class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(10), nullable=False)
    nickname = Column(String(10), nullable=False, unique=True)
    birth_date = Column(Date, nullable=True)

    schedule_patterns = relationship(
        "SchedulePattern", back_populates="member", cascade="all, delete-orphan"
    )
