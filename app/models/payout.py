from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class Payout(Base):
    __tablename__ = "payouts"
    __table_args__ = (
        UniqueConstraint("revenue_entry_id", "staff_id", name="uq_payouts_entry_staff"),
    )

    id = Column(Integer, primary_key=True, index=True)

    revenue_entry_id = Column(
        Integer, ForeignKey("revenue_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    # Snapshot of the rate used when the payout was computed
    percentage = Column(Numeric(5, 2), nullable=False)

    revenue_entry = relationship("RevenueEntry", back_populates="payouts")
    staff = relationship("Staff", back_populates="payouts")
