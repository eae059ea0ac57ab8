import datetime as dt
from pydantic import BaseModel, field_validator
from typing import Literal, Optional
from decimal import Decimal

from app.schemas.money import Money


class RevenueEntryCreate(BaseModel):
    date: dt.date  # service date
    check_date: Optional[dt.date] = None
    check_number: Optional[str] = None
    amount: Money
    patient_id: Optional[int] = None
    house_id: int
    service_code_id: int
    notes: Optional[str] = None
    status: str = "paid"

    @field_validator("check_number")
    @classmethod
    def blank_check_number_is_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class RevenueEntryUpdate(BaseModel):
    date: Optional[dt.date] = None
    check_date: Optional[dt.date] = None
    check_number: Optional[str] = None
    amount: Optional[Money] = None
    patient_id: Optional[int] = None
    house_id: Optional[int] = None
    service_code_id: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[str] = None

    @field_validator("check_number")
    @classmethod
    def blank_check_number_is_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("amount", "house_id", "service_code_id", "date", "status")
    @classmethod
    def required_fields_not_null(cls, v, info):
        # PATCH may omit these, but cannot clear them
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class RevenueEntryOut(BaseModel):
    id: int
    date: dt.date
    check_date: Optional[dt.date] = None
    check_number: Optional[str] = None
    amount: Decimal
    patient_id: Optional[int] = None
    house_id: int
    service_code_id: int
    notes: Optional[str] = None
    status: str
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class RevenueEntryWriteOut(RevenueEntryOut):
    """Entry returned by create/update, with the outcome of the payout recompute."""
    payouts_status: Literal["ok", "failed"] = "ok"
    payouts_error: Optional[str] = None
