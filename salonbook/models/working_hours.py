# salonbook/models/working_hours.py
from sqlalchemy import Column, Integer, Boolean, Time, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
import uuid
from salonbook.models.base import Base


class WorkingHours(Base):
    """Weekly opening hours, one row per day (business-wide or per staff member)"""
    __tablename__ = "working_hours"
    __table_args__ = (
        UniqueConstraint("business_id", "staff_id", "day_of_week", name="uq_working_hours_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_working_hours_day_of_week"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=True)

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_closed = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<WorkingHours(business_id={self.business_id}, day={self.day_of_week})>"
