"""Existence checks for rows a revenue entry or payout rate points at."""
from typing import Optional

from sqlalchemy.orm import Session

from app.models.house import House
from app.models.patient import Patient
from app.models.service_code import ServiceCode
from app.models.staff import Staff


class InvalidReferenceError(Exception):
    """Raised when a payload references a house/service code/staff/patient that does not exist."""
    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} {value} does not reference an existing row")


def _require(db: Session, model, field: str, value):
    row = db.get(model, value)
    if row is None:
        raise InvalidReferenceError(field, value)
    return row


def require_house(db: Session, house_id: int) -> House:
    return _require(db, House, "house_id", house_id)


def require_service_code(db: Session, service_code_id: int) -> ServiceCode:
    return _require(db, ServiceCode, "service_code_id", service_code_id)


def require_staff(db: Session, staff_id: int) -> Staff:
    return _require(db, Staff, "staff_id", staff_id)


def require_patient(db: Session, patient_id: Optional[int]) -> Optional[Patient]:
    # patient link is optional; active and inactive rows are both valid targets
    if patient_id is None:
        return None
    return _require(db, Patient, "patient_id", patient_id)
