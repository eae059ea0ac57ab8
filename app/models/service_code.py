from sqlalchemy import Column, String, Integer, Boolean
from sqlalchemy.orm import relationship
from app.core.database import Base


class ServiceCode(Base):
    __tablename__ = "service_codes"

    id = Column(Integer, primary_key=True, index=True)

    code = Column(String, nullable=False, unique=True, index=True)  # "peer support", "group", "T2023"
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    payout_rates = relationship("PayoutRate", back_populates="service_code")
    revenue_entries = relationship("RevenueEntry", back_populates="service_code")
