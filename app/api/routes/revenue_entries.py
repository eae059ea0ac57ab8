from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.api.deps import get_db
from app.core.audit import log_audit
from app.models.payout import Payout
from app.models.revenue_entry import RevenueEntry
from app.schemas.payout import PayoutOut
from app.schemas.revenue_entry import (
    RevenueEntryCreate,
    RevenueEntryOut,
    RevenueEntryUpdate,
    RevenueEntryWriteOut,
)
from app.services import revenue_entries as lifecycle
from app.services.references import InvalidReferenceError

router = APIRouter(prefix="/revenue-entries", tags=["revenue-entries"])


def _write_response(result: lifecycle.EntryWriteResult) -> RevenueEntryWriteOut:
    out = RevenueEntryWriteOut.model_validate(result.entry)
    out.payouts_status = result.payouts_status
    out.payouts_error = result.payouts_error
    return out


@router.get("", response_model=List[RevenueEntryOut])
def list_revenue_entries(
    db: Session = Depends(get_db),
    house_id: Optional[int] = Query(None),
    service_code_id: Optional[int] = Query(None),
    patient_id: Optional[int] = Query(None),
    check_number: Optional[str] = Query(None, description="Exact check number"),
    check_date: Optional[date] = Query(None),
    start_date: Optional[date] = Query(None, description="Service date from (inclusive)"),
    end_date: Optional[date] = Query(None, description="Service date to (inclusive)"),
    limit: int = Query(200, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    q = db.query(RevenueEntry)

    if house_id is not None:
        q = q.filter(RevenueEntry.house_id == house_id)
    if service_code_id is not None:
        q = q.filter(RevenueEntry.service_code_id == service_code_id)
    if patient_id is not None:
        q = q.filter(RevenueEntry.patient_id == patient_id)
    if check_number is not None:
        q = q.filter(RevenueEntry.check_number == check_number)
    if check_date is not None:
        q = q.filter(RevenueEntry.check_date == check_date)
    if start_date is not None:
        q = q.filter(RevenueEntry.date >= start_date)
    if end_date is not None:
        q = q.filter(RevenueEntry.date <= end_date)

    # newest service date first
    return q.order_by(RevenueEntry.date.desc(), RevenueEntry.id.desc()).offset(offset).limit(limit).all()


@router.get("/{entry_id}", response_model=RevenueEntryOut)
def get_revenue_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        return lifecycle.get_entry(db, entry_id)
    except lifecycle.RevenueEntryNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue entry not found")


@router.post("", response_model=RevenueEntryWriteOut, status_code=201)
def create_revenue_entry(payload: RevenueEntryCreate, db: Session = Depends(get_db)):
    """
    Save a revenue entry, then compute its payouts from the current rate table.
    If the payouts cannot be written the entry is still saved and the response
    carries payouts_status="failed"; POST /{id}/payouts/recompute retries.
    """
    try:
        result = lifecycle.create_entry(db, payload.model_dump())
    except InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))

    entry = result.entry
    log_audit(
        db,
        action="created",
        entity_type="revenue_entry",
        entity_id=str(entry.id),
        status=result.payouts_status,
        description=f"Revenue entry created: {entry.amount} on {entry.date} ({len(result.payouts)} payouts)",
    )
    return _write_response(result)


@router.patch("/{entry_id}", response_model=RevenueEntryWriteOut)
def update_revenue_entry(entry_id: int, payload: RevenueEntryUpdate, db: Session = Depends(get_db)):
    try:
        result = lifecycle.update_entry(db, entry_id, payload.model_dump(exclude_unset=True))
    except lifecycle.RevenueEntryNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue entry not found")
    except InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))

    entry = result.entry
    log_audit(
        db,
        action="updated",
        entity_type="revenue_entry",
        entity_id=str(entry.id),
        status=result.payouts_status,
        description=f"Revenue entry updated: {entry.amount} on {entry.date} ({len(result.payouts)} payouts)",
    )
    return _write_response(result)


@router.delete("/{entry_id}")
def delete_revenue_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        removed = lifecycle.delete_entry(db, entry_id)
    except lifecycle.RevenueEntryNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue entry not found")

    log_audit(
        db,
        action="deleted",
        entity_type="revenue_entry",
        entity_id=str(entry_id),
        description=f"Revenue entry deleted: {removed['amount']} on {removed['date']}",
    )
    return {"ok": True}


@router.get("/{entry_id}/payouts", response_model=List[PayoutOut])
def list_entry_payouts(entry_id: int, db: Session = Depends(get_db)):
    try:
        lifecycle.get_entry(db, entry_id)
    except lifecycle.RevenueEntryNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue entry not found")
    return (
        db.query(Payout)
        .filter(Payout.revenue_entry_id == entry_id)
        .order_by(Payout.staff_id)
        .all()
    )


@router.post("/{entry_id}/payouts/recompute", response_model=List[PayoutOut])
def recompute_entry_payouts(entry_id: int, db: Session = Depends(get_db)):
    """Idempotent: replaces the entry's payouts with ones from the current rate table."""
    try:
        payouts = lifecycle.retry_payouts(db, entry_id)
    except lifecycle.RevenueEntryNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue entry not found")
    except lifecycle.PayoutRecomputeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    log_audit(
        db,
        action="payouts_recomputed",
        entity_type="revenue_entry",
        entity_id=str(entry_id),
        status="ok",
        description=f"Payouts recomputed ({len(payouts)} rows)",
    )
    return payouts
