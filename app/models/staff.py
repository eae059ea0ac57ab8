from sqlalchemy import Column, String, Integer, Boolean
from sqlalchemy.orm import relationship
from app.core.database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    role = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    payout_rates = relationship("PayoutRate", back_populates="staff")
    payouts = relationship("Payout", back_populates="staff")
