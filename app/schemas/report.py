from pydantic import BaseModel
from typing import List
from datetime import date
from decimal import Decimal


class StaffPayoutTotalOut(BaseModel):
    """Payout total for one staff member within a bucket."""
    staff_id: int
    staff_name: str
    entries: int = 0
    total_payout: Decimal = Decimal("0.00")

    class Config:
        from_attributes = True


class DailyReportOut(BaseModel):
    """Revenue and payouts for one day, keyed by service date or check date."""
    day: date
    by: str
    entry_ids: List[int] = []
    entry_count: int = 0
    revenue_total: Decimal = Decimal("0.00")
    payout_total: Decimal = Decimal("0.00")
    retained_total: Decimal = Decimal("0.00")
    payouts_by_staff: List[StaffPayoutTotalOut] = []

    class Config:
        from_attributes = True


class PeriodReportOut(BaseModel):
    """Daily buckets plus grand totals for a date range."""
    start: date
    end: date
    by: str
    days: List[DailyReportOut] = []
    revenue_total: Decimal = Decimal("0.00")
    payout_total: Decimal = Decimal("0.00")
    retained_total: Decimal = Decimal("0.00")
    expense_total: Decimal = Decimal("0.00")
    net_total: Decimal = Decimal("0.00")

    class Config:
        from_attributes = True
