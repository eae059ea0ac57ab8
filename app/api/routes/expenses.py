from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.api.deps import get_db
from app.core.audit import log_audit
from app.models.expense import Expense
from app.schemas.expense import ExpenseCreate, ExpenseOut, ExpenseUpdate

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseOut])
def list_expenses(
    db: Session = Depends(get_db),
    category: Optional[str] = Query(None),
    vendor: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: int = Query(200, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    q = db.query(Expense)
    if category:
        q = q.filter(Expense.category == category)
    if vendor:
        q = q.filter(Expense.vendor == vendor)
    if start_date is not None:
        q = q.filter(Expense.date >= start_date)
    if end_date is not None:
        q = q.filter(Expense.date <= end_date)
    return q.order_by(Expense.date.desc(), Expense.id.desc()).offset(offset).limit(limit).all()


@router.post("", response_model=ExpenseOut, status_code=201)
def create_expense(payload: ExpenseCreate, db: Session = Depends(get_db)):
    expense = Expense(**payload.model_dump())
    db.add(expense)
    db.commit()
    db.refresh(expense)
    log_audit(
        db,
        action="created",
        entity_type="expense",
        entity_id=str(expense.id),
        status=expense.status,
        description=f"Expense created: {expense.vendor} {expense.amount}",
    )
    return expense


@router.patch("/{expense_id}", response_model=ExpenseOut)
def update_expense(expense_id: int, payload: ExpenseUpdate, db: Session = Depends(get_db)):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(expense, k, v)

    db.commit()
    db.refresh(expense)
    log_audit(
        db,
        action="updated",
        entity_type="expense",
        entity_id=str(expense.id),
        status=expense.status,
        description=f"Expense updated: {expense.vendor} {expense.amount}",
    )
    return expense


@router.delete("/{expense_id}")
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    vendor = expense.vendor
    db.delete(expense)
    db.commit()
    log_audit(
        db,
        action="deleted",
        entity_type="expense",
        entity_id=str(expense_id),
        description=f"Expense deleted: {vendor}",
    )
    return {"ok": True}
