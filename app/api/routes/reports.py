"""
Revenue & payout reporting endpoints.
Aggregates revenue entries and their payouts by service date or check date.
"""
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.expense import Expense
from app.models.payout import Payout
from app.models.revenue_entry import RevenueEntry
from app.models.staff import Staff
from app.schemas.report import DailyReportOut, PeriodReportOut
from app.services.reporting import build_daily_report, build_period_report, latest_check_date

router = APIRouter(prefix="/reports", tags=["reports"])

DateField = Query("date", pattern="^(date|check_date)$", description="Bucket by service date or check date")


def _date_column(by: str):
    return RevenueEntry.check_date if by == "check_date" else RevenueEntry.date


def _entries_between(db: Session, start: date, end: date, by: str):
    col = _date_column(by)
    return db.query(RevenueEntry).filter(col.isnot(None), col >= start, col <= end).all()


def _payouts_for(db: Session, entries):
    ids = [e.id for e in entries]
    if not ids:
        return []
    return db.query(Payout).filter(Payout.revenue_entry_id.in_(ids)).all()


def _staff_names(db: Session):
    return {s.id: s.name for s in db.query(Staff).all()}


def _daily(db: Session, day: date, by: str):
    entries = _entries_between(db, day, day, by)
    return build_daily_report(day, entries, _payouts_for(db, entries), _staff_names(db), by=by)


@router.get("/daily/{day}", response_model=DailyReportOut)
def daily_report(day: date, by: str = DateField, db: Session = Depends(get_db)):
    """Revenue entries, totals and per-staff payouts for one day."""
    return _daily(db, day, by)


@router.get("/latest-check", response_model=DailyReportOut)
def latest_check_report(db: Session = Depends(get_db)):
    """Daily report for the most recent check date on any revenue entry."""
    entries = db.query(RevenueEntry).filter(RevenueEntry.check_date.isnot(None)).all()
    latest = latest_check_date(entries)
    if latest is None:
        raise HTTPException(status_code=404, detail="No revenue entry has a check date")
    return _daily(db, latest, "check_date")


@router.get("/period", response_model=PeriodReportOut)
def period_report(
    start_date: Optional[date] = Query(None, description="Defaults to 30 days before end_date"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    by: str = DateField,
    db: Session = Depends(get_db),
):
    end = end_date or date.today()
    start = start_date or (end - timedelta(days=30))
    if end < start:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    entries = _entries_between(db, start, end, by)
    expenses = db.query(Expense).filter(Expense.date >= start, Expense.date <= end).all()
    return build_period_report(
        start,
        end,
        entries,
        _payouts_for(db, entries),
        _staff_names(db),
        expenses=expenses,
        by=by,
    )
