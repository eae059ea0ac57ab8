from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.api.deps import get_db
from app.core.audit import log_audit
from app.core.money import HUNDRED, quantize_money
from app.models.payout_rate import PayoutRate
from app.schemas.payout_rate import (
    PayoutRateBatch,
    PayoutRateCreate,
    PayoutRateOut,
    PayoutRateUpdate,
    RatePairTotalOut,
)
from app.services.rate_table import (
    RateEdit,
    RateNotFoundError,
    RateTotalExceededError,
    apply_rate_batch,
    rate_matrix,
    update_rate_percentage,
)
from app.services.references import InvalidReferenceError

router = APIRouter(prefix="/payout-rates", tags=["payout-rates"])


def _over_limit(e: RateTotalExceededError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "message": "Total percentage cannot exceed 100% for any house/service code combination",
            "violations": [v.as_dict() for v in e.violations],
        },
    )


def _edit_from(payload: PayoutRateCreate) -> RateEdit:
    return RateEdit(
        house_id=payload.house_id,
        service_code_id=payload.service_code_id,
        staff_id=payload.staff_id,
        percentage=payload.percentage,
    )


@router.get("", response_model=List[PayoutRateOut])
def list_payout_rates(
    db: Session = Depends(get_db),
    house_id: Optional[int] = Query(None),
    service_code_id: Optional[int] = Query(None),
    staff_id: Optional[int] = Query(None),
):
    q = db.query(PayoutRate)
    if house_id is not None:
        q = q.filter(PayoutRate.house_id == house_id)
    if service_code_id is not None:
        q = q.filter(PayoutRate.service_code_id == service_code_id)
    if staff_id is not None:
        q = q.filter(PayoutRate.staff_id == staff_id)
    return q.order_by(PayoutRate.house_id, PayoutRate.service_code_id, PayoutRate.staff_id).all()


@router.get("/totals", response_model=List[RatePairTotalOut])
def payout_rate_totals(db: Session = Depends(get_db)):
    """Per (house, service code): allocated percentage and what is left for the owner."""
    matrix = rate_matrix(db.query(PayoutRate).all())
    out = []
    for (house_id, service_code_id), by_staff in sorted(matrix.items()):
        total = quantize_money(sum(by_staff.values()))
        out.append(
            {
                "house_id": house_id,
                "service_code_id": service_code_id,
                "total_percentage": total,
                "staff_count": sum(1 for pct in by_staff.values() if pct > 0),
                "remaining_percentage": quantize_money(HUNDRED - total),
            }
        )
    return out


@router.post("", response_model=PayoutRateOut, status_code=201)
def create_payout_rate(payload: PayoutRateCreate, db: Session = Depends(get_db)):
    """
    Create a rate for a (house, service code, staff) triple. If the triple
    already has a row, its percentage is updated instead.
    """
    try:
        rate = apply_rate_batch(db, [_edit_from(payload)])[0]
    except InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RateTotalExceededError as e:
        raise _over_limit(e)

    log_audit(
        db,
        action="created",
        entity_type="payout_rate",
        entity_id=str(rate.id),
        description=(
            f"Payout rate set: house {rate.house_id} / service code {rate.service_code_id} / "
            f"staff {rate.staff_id} = {rate.percentage}%"
        ),
    )
    return rate


@router.put("", response_model=List[PayoutRateOut])
def save_payout_rates(payload: PayoutRateBatch, db: Session = Depends(get_db)):
    """
    Save an edited rate table in one go. If any house/service code pair would
    exceed 100%, nothing is saved and the offending pairs are returned.
    """
    edits = [_edit_from(r) for r in payload.rates]
    try:
        rates = apply_rate_batch(db, edits)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RateTotalExceededError as e:
        raise _over_limit(e)

    log_audit(
        db,
        action="updated",
        entity_type="payout_rate",
        entity_id="batch",
        description=f"Payout rate table saved ({len(rates)} rows)",
    )
    return rates


@router.patch("/{rate_id}", response_model=PayoutRateOut)
def update_payout_rate(rate_id: int, payload: PayoutRateUpdate, db: Session = Depends(get_db)):
    try:
        rate = update_rate_percentage(db, rate_id, payload.percentage)
    except RateNotFoundError:
        raise HTTPException(status_code=404, detail="Payout rate not found")
    except RateTotalExceededError as e:
        raise _over_limit(e)

    log_audit(
        db,
        action="updated",
        entity_type="payout_rate",
        entity_id=str(rate.id),
        description=f"Payout rate {rate.id} set to {rate.percentage}%",
    )
    return rate
