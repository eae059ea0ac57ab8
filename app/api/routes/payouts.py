from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.api.deps import get_db
from app.models.payout import Payout
from app.models.revenue_entry import RevenueEntry
from app.models.staff import Staff
from app.schemas.payout import PayoutOut, PayoutPreviewIn, PayoutPreviewLine, StaffPayoutSummaryOut
from app.services.reporting import payouts_by_staff
from app.services.revenue_entries import preview_payouts

router = APIRouter(prefix="/payouts", tags=["payouts"])


def _payouts_query(db: Session, staff_id: Optional[int], check_date: Optional[date]):
    q = db.query(Payout)
    if staff_id is not None:
        q = q.filter(Payout.staff_id == staff_id)
    if check_date is not None:
        q = q.join(RevenueEntry, RevenueEntry.id == Payout.revenue_entry_id).filter(
            RevenueEntry.check_date == check_date
        )
    return q


@router.get("", response_model=List[PayoutOut])
def list_payouts(
    db: Session = Depends(get_db),
    staff_id: Optional[int] = Query(None),
    revenue_entry_id: Optional[int] = Query(None),
    check_date: Optional[date] = Query(None, description="Only payouts of entries with this check date"),
):
    q = _payouts_query(db, staff_id, check_date)
    if revenue_entry_id is not None:
        q = q.filter(Payout.revenue_entry_id == revenue_entry_id)
    return q.order_by(Payout.revenue_entry_id, Payout.staff_id).all()


@router.get("/summary", response_model=List[StaffPayoutSummaryOut])
def payout_summary(
    db: Session = Depends(get_db),
    check_date: Optional[date] = Query(None, description="Limit to entries with this check date"),
):
    """Total owed per staff member, optionally for one check date."""
    staff_names = {s.id: s.name for s in db.query(Staff).all()}
    totals = payouts_by_staff(_payouts_query(db, None, check_date).all(), staff_names)
    return [
        StaffPayoutSummaryOut(
            staff_id=t.staff_id,
            staff_name=t.staff_name,
            entries=t.entries,
            total_payout=t.total_payout,
            check_date=check_date,
        )
        for t in totals
    ]


@router.post("/preview", response_model=List[PayoutPreviewLine])
def calculate_payouts_preview(payload: PayoutPreviewIn, db: Session = Depends(get_db)):
    """
    Read-only payout preview for an entry that has not been saved yet.
    Every staff member is listed, including those at 0%.
    """
    return preview_payouts(db, payload.amount, payload.house_id, payload.service_code_id)
