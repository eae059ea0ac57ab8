from pydantic import BaseModel
from typing import Optional
from datetime import date
from decimal import Decimal

from app.schemas.money import Money


class PayoutOut(BaseModel):
    id: int
    revenue_entry_id: int
    staff_id: int
    amount: Decimal
    percentage: Decimal

    class Config:
        from_attributes = True


class PayoutPreviewIn(BaseModel):
    amount: Money
    house_id: int
    service_code_id: int


class PayoutPreviewLine(BaseModel):
    staff_id: int
    staff_name: Optional[str] = None
    percentage: Decimal
    amount: Decimal

    class Config:
        from_attributes = True


class StaffPayoutSummaryOut(BaseModel):
    staff_id: int
    staff_name: str
    entries: int = 0
    total_payout: Decimal = Decimal("0.00")
    check_date: Optional[date] = None

    class Config:
        from_attributes = True
