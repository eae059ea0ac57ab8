from sqlalchemy import Column, String, Integer, Numeric, Date, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class CheckTracking(Base):
    __tablename__ = "check_tracking"

    id = Column(Integer, primary_key=True, index=True)

    service_provider = Column(String, nullable=False)  # issuer of the check
    check_number = Column(String, nullable=False, index=True)
    check_amount = Column(Numeric(10, 2), nullable=False)

    check_date = Column(Date, nullable=False)
    processed_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
