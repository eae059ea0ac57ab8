from sqlalchemy import Column, String, Integer, ForeignKey, Numeric, Date, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class RevenueEntry(Base):
    __tablename__ = "revenue_entries"

    id = Column(Integer, primary_key=True, index=True)

    date = Column(Date, nullable=False, index=True)  # service date
    check_date = Column(Date, nullable=True, index=True)  # date the check was/will be issued
    # Reconciliation key against check_tracking.check_number (exact match)
    check_number = Column(String, nullable=True, index=True)

    amount = Column(Numeric(10, 2), nullable=False)

    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=True, index=True)
    house_id = Column(Integer, ForeignKey("houses.id"), nullable=False, index=True)
    service_code_id = Column(Integer, ForeignKey("service_codes.id"), nullable=False, index=True)

    notes = Column(String, nullable=True)
    status = Column(String, nullable=False, default="paid")

    patient = relationship("Patient", back_populates="revenue_entries")
    house = relationship("House", back_populates="revenue_entries")
    service_code = relationship("ServiceCode", back_populates="revenue_entries")

    # An entry exclusively owns its payouts
    payouts = relationship(
        "Payout",
        back_populates="revenue_entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
