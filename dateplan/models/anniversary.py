import enum
from sqlalchemy import Column, Integer, String, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from dateplan.database import Base

class AnniversaryCategory(str, enum.Enum):
    BIRTH = "BIRTH"
    FIRST_DATE = "FIRST_DATE"
    OTHER = "OTHER"

class AnniversaryRepeatRule(str, enum.Enum):
    NONE = "NONE"
    HUNDRED_DAYS = "HUNDRED_DAYS"
    YEAR = "YEAR"

class AnniversaryPattern(Base):
    __tablename__ = "anniversary_patterns"

    id = Column(Integer, primary_key=True, index=True)
    couple_id = Column(Integer, ForeignKey("couples.id", ondelete="CASCADE"), nullable=False)
    category = Column(Enum(AnniversaryCategory), nullable=False)
    repeat_start_date = Column(Date, nullable=False)
    repeat_rule = Column(Enum(AnniversaryRepeatRule), nullable=False)

    couple = relationship("Couple", back_populates="anniversary_patterns")
    anniversaries = relationship(
        "Anniversary",
        back_populates="pattern",
        cascade="all, delete-orphan",
        order_by="Anniversary.date",
    )

class Anniversary(Base):
    __tablename__ = "anniversaries"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(30), nullable=False)
    content = Column(String(100), nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    pattern_id = Column(
        Integer, ForeignKey("anniversary_patterns.id", ondelete="CASCADE"), nullable=False
    )

    pattern = relationship("AnniversaryPattern", back_populates="anniversaries")
