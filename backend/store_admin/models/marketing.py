"""
Descuentos y campañas de marketing
"""
from sqlalchemy import DECIMAL, JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from store_admin.core.database import Base
from store_admin.models.common import new_id, utcnow


class Discount(Base):
    __tablename__ = "discounts"
    __table_args__ = (UniqueConstraint("store_id", "code", name="uq_discounts_store_code"),)

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    code = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, default="percentage")  # percentage | fixed
    value = Column(DECIMAL(12, 2), nullable=False)
    min_purchase = Column(DECIMAL(12, 2), default=0)
    usage_limit = Column(Integer)
    usage_count = Column(Integer, default=0)
    expires_at = Column(DateTime(timezone=True))
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="discounts")


class MarketingCampaign(Base):
    __tablename__ = "marketing_campaigns"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    type = Column(String(50), default="email")
    status = Column(String(50), default="draft")
    subject = Column(String(255))
    content = Column(Text)
    target_audience = Column(JSON)
    scheduled_for = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="campaigns")
