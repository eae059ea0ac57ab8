from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class PayoutRate(Base):
    __tablename__ = "payout_rates"
    __table_args__ = (
        # Rates are upserted by this triple; the triple never changes after creation
        UniqueConstraint("house_id", "service_code_id", "staff_id", name="uq_payout_rates_triple"),
    )

    id = Column(Integer, primary_key=True, index=True)

    house_id = Column(Integer, ForeignKey("houses.id"), nullable=False, index=True)
    service_code_id = Column(Integer, ForeignKey("service_codes.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)

    # 0.00 - 100.00; per (house, service code) the staff rows sum to at most 100
    percentage = Column(Numeric(5, 2), nullable=False, default=0)

    house = relationship("House", back_populates="payout_rates")
    service_code = relationship("ServiceCode", back_populates="payout_rates")
    staff = relationship("Staff", back_populates="payout_rates")
