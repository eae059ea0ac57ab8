from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.api.deps import get_db
from app.models.patient import Patient
from app.schemas.patient import PatientCreate, PatientUpdate, PatientOut
from app.services.references import InvalidReferenceError, require_house
from app.core.audit import log_audit

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("", response_model=List[PatientOut])
def list_patients(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="search by name/phone"),
    house_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None, description="active|inactive|graduated"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    q = db.query(Patient)
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(Patient.name.ilike(like) | Patient.phone.ilike(like))
    if house_id is not None:
        q = q.filter(Patient.house_id == house_id)
    if status:
        q = q.filter(Patient.status == status)
    return q.order_by(Patient.name).offset(offset).limit(limit).all()


@router.get("/{patient_id}", response_model=PatientOut)
def get_patient(patient_id: int, db: Session = Depends(get_db)):
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.post("", response_model=PatientOut, status_code=201)
def create_patient(payload: PatientCreate, db: Session = Depends(get_db)):
    if payload.house_id is not None:
        try:
            require_house(db, payload.house_id)
        except InvalidReferenceError as e:
            raise HTTPException(status_code=400, detail=str(e))

    patient = Patient(**payload.model_dump())
    db.add(patient)
    db.commit()
    db.refresh(patient)
    log_audit(
        db,
        action="created",
        entity_type="patient",
        entity_id=str(patient.id),
        status=patient.status,
        description=f"Patient created: {patient.name}",
    )
    return patient


@router.patch("/{patient_id}", response_model=PatientOut)
def update_patient(patient_id: int, payload: PatientUpdate, db: Session = Depends(get_db)):
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    data = payload.model_dump(exclude_unset=True)
    if data.get("house_id") is not None:
        try:
            require_house(db, data["house_id"])
        except InvalidReferenceError as e:
            raise HTTPException(status_code=400, detail=str(e))

    for k, v in data.items():
        setattr(patient, k, v)

    db.commit()
    db.refresh(patient)
    log_audit(
        db,
        action="updated",
        entity_type="patient",
        entity_id=str(patient.id),
        status=patient.status,
        description=f"Patient updated: {patient.name}",
    )
    return patient
