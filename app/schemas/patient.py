from pydantic import BaseModel
from typing import Literal, Optional
from datetime import date

PatientStatus = Literal["active", "inactive", "graduated"]


class PatientBase(BaseModel):
    name: str
    phone: Optional[str] = None
    house_id: Optional[int] = None
    program: Optional[str] = None
    start_date: Optional[date] = None
    status: PatientStatus = "active"


class PatientCreate(PatientBase):
    pass


class PatientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    house_id: Optional[int] = None
    program: Optional[str] = None
    start_date: Optional[date] = None
    status: Optional[PatientStatus] = None


class PatientOut(PatientBase):
    id: int

    class Config:
        from_attributes = True
