from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_db
from app.models.service_code import ServiceCode
from app.schemas.catalog import ServiceCodeCreate, ServiceCodeUpdate, ServiceCodeOut
from app.core.audit import log_audit

router = APIRouter(prefix="/service-codes", tags=["service-codes"])


def _code_taken(db: Session, code: str, exclude_id: int = None) -> bool:
    q = db.query(ServiceCode).filter(ServiceCode.code == code)
    if exclude_id is not None:
        q = q.filter(ServiceCode.id != exclude_id)
    return db.query(q.exists()).scalar()


@router.get("", response_model=List[ServiceCodeOut])
def list_service_codes(
    db: Session = Depends(get_db),
    include_inactive: bool = Query(False),
):
    q = db.query(ServiceCode)
    if not include_inactive:
        q = q.filter(ServiceCode.is_active == True)
    return q.order_by(ServiceCode.code).all()


@router.post("", response_model=ServiceCodeOut, status_code=201)
def create_service_code(payload: ServiceCodeCreate, db: Session = Depends(get_db)):
    if _code_taken(db, payload.code):
        raise HTTPException(status_code=409, detail="Service code already exists")

    row = ServiceCode(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    log_audit(
        db,
        action="created",
        entity_type="service_code",
        entity_id=str(row.id),
        description=f"Service code created: {row.code}",
    )
    return row


@router.patch("/{service_code_id}", response_model=ServiceCodeOut)
def update_service_code(service_code_id: int, payload: ServiceCodeUpdate, db: Session = Depends(get_db)):
    row = db.query(ServiceCode).filter(ServiceCode.id == service_code_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Service code not found")

    data = payload.model_dump(exclude_unset=True)
    if data.get("code") is not None and _code_taken(db, data["code"], exclude_id=row.id):
        raise HTTPException(status_code=409, detail="Service code already exists")

    for k, v in data.items():
        setattr(row, k, v)

    db.commit()
    db.refresh(row)
    log_audit(
        db,
        action="updated",
        entity_type="service_code",
        entity_id=str(row.id),
        description=f"Service code updated: {row.code}",
    )
    return row
