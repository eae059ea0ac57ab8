from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.api.deps import get_db
from app.core.audit import log_audit
from app.models.check_tracking import CheckTracking
from app.models.house import House
from app.models.patient import Patient
from app.models.revenue_entry import RevenueEntry
from app.models.service_code import ServiceCode
from app.schemas.check_tracking import (
    CheckAuditOut,
    CheckTrackingCreate,
    CheckTrackingOut,
    CheckTrackingUpdate,
)
from app.services.reconciliation import reconcile, reconcile_all

router = APIRouter(prefix="/check-tracking", tags=["check-tracking"])


def _display_names(db: Session):
    houses = {h.id: h.name for h in db.query(House).all()}
    service_codes = {s.id: s.code for s in db.query(ServiceCode).all()}
    patients = {p.id: p.name for p in db.query(Patient).all()}
    return houses, service_codes, patients


def _get_check(db: Session, check_id: int) -> CheckTracking:
    row = db.query(CheckTracking).filter(CheckTracking.id == check_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Check tracking entry not found")
    return row


@router.get("", response_model=List[CheckTrackingOut])
def list_check_tracking(
    db: Session = Depends(get_db),
    service_provider: Optional[str] = Query(None),
    check_number: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, description="Check date from (inclusive)"),
    end_date: Optional[date] = Query(None, description="Check date to (inclusive)"),
):
    q = db.query(CheckTracking)
    if service_provider:
        q = q.filter(CheckTracking.service_provider == service_provider)
    if check_number:
        q = q.filter(CheckTracking.check_number == check_number)
    if start_date is not None:
        q = q.filter(CheckTracking.check_date >= start_date)
    if end_date is not None:
        q = q.filter(CheckTracking.check_date <= end_date)
    return q.order_by(CheckTracking.check_date.desc(), CheckTracking.id.desc()).all()


@router.get("/audit", response_model=List[CheckAuditOut])
def audit_all_checks(
    db: Session = Depends(get_db),
    unbalanced_only: bool = Query(False),
):
    """Reconcile every tracked check against the revenue entries sharing its number."""
    checks = db.query(CheckTracking).order_by(CheckTracking.check_date.desc(), CheckTracking.id.desc()).all()
    entries = db.query(RevenueEntry).filter(RevenueEntry.check_number.isnot(None)).all()
    reports = reconcile_all(checks, entries, *_display_names(db))
    if unbalanced_only:
        reports = [r for r in reports if not r.balanced]
    return reports


@router.get("/{check_id}", response_model=CheckTrackingOut)
def get_check_tracking(check_id: int, db: Session = Depends(get_db)):
    return _get_check(db, check_id)


@router.get("/{check_id}/audit", response_model=CheckAuditOut)
def audit_check(check_id: int, db: Session = Depends(get_db)):
    """
    Compare one check with the revenue entries carrying its check number.
    An unmatched or unbalanced check is reported, never raised as an error.
    """
    check = _get_check(db, check_id)
    entries = db.query(RevenueEntry).filter(RevenueEntry.check_number == check.check_number).all()
    return reconcile(check, entries, *_display_names(db))


@router.post("", response_model=CheckTrackingOut, status_code=201)
def create_check_tracking(payload: CheckTrackingCreate, db: Session = Depends(get_db)):
    row = CheckTracking(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    log_audit(
        db,
        action="created",
        entity_type="check_tracking",
        entity_id=str(row.id),
        description=f"Check {row.check_number} from {row.service_provider}: {row.check_amount}",
    )
    return row


@router.patch("/{check_id}", response_model=CheckTrackingOut)
def update_check_tracking(check_id: int, payload: CheckTrackingUpdate, db: Session = Depends(get_db)):
    row = _get_check(db, check_id)

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(row, k, v)

    db.commit()
    db.refresh(row)
    log_audit(
        db,
        action="updated",
        entity_type="check_tracking",
        entity_id=str(row.id),
        description=f"Check {row.check_number} updated",
    )
    return row


@router.delete("/{check_id}")
def delete_check_tracking(check_id: int, db: Session = Depends(get_db)):
    row = _get_check(db, check_id)
    check_number = row.check_number
    db.delete(row)
    db.commit()
    log_audit(
        db,
        action="deleted",
        entity_type="check_tracking",
        entity_id=str(check_id),
        description=f"Check {check_number} deleted",
    )
    return {"ok": True}
