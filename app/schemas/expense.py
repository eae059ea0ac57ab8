import datetime as dt
from pydantic import BaseModel
from typing import Optional

from app.schemas.money import Money


class ExpenseBase(BaseModel):
    date: dt.date
    amount: Money
    vendor: str
    category: str
    description: Optional[str] = None
    status: str = "paid"


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    date: Optional[dt.date] = None
    amount: Optional[Money] = None
    vendor: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class ExpenseOut(ExpenseBase):
    id: int
    created_at: dt.datetime

    class Config:
        from_attributes = True
