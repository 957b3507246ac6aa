from sqlalchemy import Column, Integer, Date, ForeignKey
from sqlalchemy.orm import relationship
from dateplan.database import Base

class Couple(Base):
    __tablename__ = "couples"

    id = Column(Integer, primary_key=True, index=True)
    member1_id = Column(Integer, ForeignKey("members.id"), nullable=False, unique=True)
    member2_id = Column(Integer, ForeignKey("members.id"), nullable=False, unique=True)
    first_date = Column(Date, nullable=False)

    member1 = relationship("Member", foreign_keys=[member1_id])
    member2 = relationship("Member", foreign_keys=[member2_id])
    anniversary_patterns = relationship(
        "AnniversaryPattern", back_populates="couple", cascade="all, delete-orphan"
    )

    def partner_id_of(self, member_id: int) -> int:
        return self.member2_id if self.member1_id == member_id else self.member1_id
