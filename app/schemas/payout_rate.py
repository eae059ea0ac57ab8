from pydantic import BaseModel, Field
from typing import Annotated, List
from decimal import Decimal

# 0.00 - 100.00 with two decimals ("xx.xx%")
Percentage = Annotated[Decimal, Field(ge=0, le=100, max_digits=5, decimal_places=2)]


class PayoutRateCreate(BaseModel):
    house_id: int
    service_code_id: int
    staff_id: int
    percentage: Percentage


class PayoutRateUpdate(BaseModel):
    # The (house, service code, staff) key is immutable; only the percentage changes
    percentage: Percentage


class PayoutRateBatch(BaseModel):
    """Full or partial rate table save; rejected as a whole if any pair exceeds 100%."""
    rates: List[PayoutRateCreate]


class PayoutRateOut(BaseModel):
    id: int
    house_id: int
    service_code_id: int
    staff_id: int
    percentage: Decimal

    class Config:
        from_attributes = True


class RatePairTotalOut(BaseModel):
    house_id: int
    service_code_id: int
    total_percentage: Decimal
    staff_count: int
    remaining_percentage: Decimal
