from sqlalchemy import Column, String, Integer, Boolean
from sqlalchemy.orm import relationship
from app.core.database import Base


class House(Base):
    __tablename__ = "houses"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    address = Column(String, nullable=True)

    # Inactive houses stay referenced by historical revenue entries and rates
    is_active = Column(Boolean, nullable=False, default=True)

    patients = relationship("Patient", back_populates="house")
    payout_rates = relationship("PayoutRate", back_populates="house")
    revenue_entries = relationship("RevenueEntry", back_populates="house")
