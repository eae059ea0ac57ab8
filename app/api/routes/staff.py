from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_db
from app.models.staff import Staff
from app.schemas.catalog import StaffCreate, StaffUpdate, StaffOut
from app.core.audit import log_audit

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", response_model=List[StaffOut])
def list_staff(
    db: Session = Depends(get_db),
    include_inactive: bool = Query(True, description="Payout previews include inactive staff too"),
):
    q = db.query(Staff)
    if not include_inactive:
        q = q.filter(Staff.is_active == True)
    return q.order_by(Staff.name).all()


@router.post("", response_model=StaffOut, status_code=201)
def create_staff(payload: StaffCreate, db: Session = Depends(get_db)):
    member = Staff(**payload.model_dump())
    db.add(member)
    db.commit()
    db.refresh(member)
    log_audit(
        db,
        action="created",
        entity_type="staff",
        entity_id=str(member.id),
        description=f"Staff member created: {member.name}",
    )
    return member


@router.patch("/{staff_id}", response_model=StaffOut)
def update_staff(staff_id: int, payload: StaffUpdate, db: Session = Depends(get_db)):
    member = db.query(Staff).filter(Staff.id == staff_id).first()
    if not member:
        raise HTTPException(status_code=404, detail="Staff member not found")

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(member, k, v)

    db.commit()
    db.refresh(member)
    log_audit(
        db,
        action="updated",
        entity_type="staff",
        entity_id=str(member.id),
        description=f"Staff member updated: {member.name}",
    )
    return member
