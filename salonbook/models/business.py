# salonbook/models/business.py
"""
Business Model - tenant root for every salon-scoped table
"""
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.sql import func
import uuid
from salonbook.models.base import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    phone_number = Column(String(20), nullable=True)

    # Where "new online booking" SMS alerts go
    notification_phone = Column(String(20), nullable=True)
    business_notifications_enabled = Column(Boolean, default=True, nullable=False)

    timezone = Column(String(50), default="UTC")

    # Technical fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"
