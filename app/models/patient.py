from sqlalchemy import Column, String, Integer, ForeignKey, Date
from sqlalchemy.orm import relationship
from app.core.database import Base


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)

    house_id = Column(Integer, ForeignKey("houses.id"), nullable=True, index=True)
    house = relationship("House", back_populates="patients")

    program = Column(String, nullable=True)
    start_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="active")  # active / inactive / graduated

    revenue_entries = relationship("RevenueEntry", back_populates="patient")
