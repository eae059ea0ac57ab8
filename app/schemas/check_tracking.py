from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from app.schemas.money import Money


class CheckTrackingBase(BaseModel):
    service_provider: str
    check_number: str
    check_amount: Money
    check_date: date
    processed_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("check_number", "service_provider")
    @classmethod
    def not_blank(cls, v, info):
        if not v.strip():
            raise ValueError(f"{info.field_name} cannot be blank")
        return v.strip()


class CheckTrackingCreate(CheckTrackingBase):
    pass


class CheckTrackingUpdate(BaseModel):
    service_provider: Optional[str] = None
    check_number: Optional[str] = None
    check_amount: Optional[Money] = None
    check_date: Optional[date] = None
    processed_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("service_provider", "check_number", "check_amount", "check_date")
    @classmethod
    def required_fields_not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        if isinstance(v, str):
            if not v.strip():
                raise ValueError(f"{info.field_name} cannot be blank")
            return v.strip()
        return v


class CheckTrackingOut(CheckTrackingBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class AuditEntryOut(BaseModel):
    id: int
    date: date
    check_date: Optional[date] = None
    amount: Decimal
    house_id: int
    service_code_id: int
    patient_id: Optional[int] = None
    house_name: Optional[str] = None
    service_code: Optional[str] = None
    patient_name: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class CheckAuditOut(BaseModel):
    """Check vs. revenue entries sharing its check number."""
    check_id: int
    check_number: str
    service_provider: str
    check_amount: Decimal
    revenue_total: Decimal
    difference: Decimal  # check_amount - revenue_total
    balanced: bool
    status: str  # balanced | check_exceeds_revenue | revenue_exceeds_check
    message: str
    matching_count: int
    entries: List[AuditEntryOut] = []

    class Config:
        from_attributes = True
