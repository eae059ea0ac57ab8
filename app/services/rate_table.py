"""
Payout rate table: validation and all-or-nothing saves.

Invariant: for every (house, service code) pair the staff percentages sum to
at most 100.00. Edits are overlaid on the stored table before checking, so a
batch that only touches some staff of a pair is still checked against the
full pair.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.money import HUNDRED, ZERO, quantize_money, to_decimal
from app.models.payout_rate import PayoutRate
from app.services.references import require_house, require_service_code, require_staff

logger = logging.getLogger(__name__)

Triple = Tuple[int, int, int]
Pair = Tuple[int, int]


@dataclass(frozen=True)
class RateEdit:
    house_id: int
    service_code_id: int
    staff_id: int
    percentage: Decimal

    @property
    def triple(self) -> Triple:
        return (self.house_id, self.service_code_id, self.staff_id)


@dataclass(frozen=True)
class RateViolation:
    house_id: int
    service_code_id: int
    total: Decimal

    def as_dict(self) -> dict:
        return {
            "house_id": self.house_id,
            "service_code_id": self.service_code_id,
            "total_percentage": str(self.total),
        }


class RateTotalExceededError(Exception):
    """Raised when a save would push any (house, service code) pair over 100%."""
    def __init__(self, violations: Sequence[RateViolation]):
        self.violations = list(violations)
        pairs = ", ".join(
            f"house {v.house_id}/service code {v.service_code_id} ({v.total}%)" for v in self.violations
        )
        super().__init__(f"Total percentage exceeds 100% for: {pairs}")


class RateNotFoundError(Exception):
    def __init__(self, rate_id: int):
        self.rate_id = rate_id
        super().__init__(f"Payout rate {rate_id} not found")


def _triple_of(rate) -> Triple:
    return (rate.house_id, rate.service_code_id, rate.staff_id)


def validate_rates(
    edited: Iterable[RateEdit],
    existing: Iterable = (),
) -> List[RateViolation]:
    """
    Return the (house, service code) pairs whose total would exceed 100.00.
    An empty list means the edit is valid. Only pairs touched by the edit are
    reported; a pair whose rows are all zero is valid.
    """
    effective: Dict[Triple, Decimal] = {
        _triple_of(r): to_decimal(r.percentage) for r in existing
    }
    touched: List[Pair] = []
    for edit in edited:
        effective[edit.triple] = to_decimal(edit.percentage)
        pair = (edit.house_id, edit.service_code_id)
        if pair not in touched:
            touched.append(pair)

    totals: Dict[Pair, Decimal] = {}
    for (house_id, service_code_id, _staff_id), pct in effective.items():
        key = (house_id, service_code_id)
        totals[key] = totals.get(key, ZERO) + pct

    return [
        RateViolation(house_id=h, service_code_id=s, total=quantize_money(totals[(h, s)]))
        for (h, s) in touched
        if totals[(h, s)] > HUNDRED
    ]


def _check_references(db: Session, edits: Sequence[RateEdit]) -> None:
    for house_id in {e.house_id for e in edits}:
        require_house(db, house_id)
    for service_code_id in {e.service_code_id for e in edits}:
        require_service_code(db, service_code_id)
    for staff_id in {e.staff_id for e in edits}:
        require_staff(db, staff_id)


def apply_rate_batch(db: Session, edits: Sequence[RateEdit]) -> List[PayoutRate]:
    """
    Validate then upsert every edit in one transaction. Existing triples get
    their percentage updated in place, new triples are inserted, rows set to 0
    are kept. Raises RateTotalExceededError without writing anything.
    """
    edits = list(edits)
    if not edits:
        return []

    _check_references(db, edits)

    pairs = {(e.house_id, e.service_code_id) for e in edits}
    existing = [
        r for r in db.query(PayoutRate).all()
        if (r.house_id, r.service_code_id) in pairs
    ]

    violations = validate_rates(edits, existing)
    if violations:
        logger.warning("Rejected payout rate batch of %d rows: %s", len(edits), violations)
        raise RateTotalExceededError(violations)

    by_triple = {_triple_of(r): r for r in existing}
    saved: Dict[Triple, PayoutRate] = {}
    try:
        for edit in edits:
            row = by_triple.get(edit.triple)
            if row is None:
                row = PayoutRate(
                    house_id=edit.house_id,
                    service_code_id=edit.service_code_id,
                    staff_id=edit.staff_id,
                    percentage=quantize_money(edit.percentage),
                )
                db.add(row)
                by_triple[edit.triple] = row
            else:
                row.percentage = quantize_money(edit.percentage)
            saved[edit.triple] = row
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to save payout rate batch")
        raise

    rows = list(saved.values())
    for row in rows:
        db.refresh(row)
    logger.info("Saved %d payout rates across %d house/service pairs", len(rows), len(pairs))
    return rows


def update_rate_percentage(db: Session, rate_id: int, percentage: Decimal) -> PayoutRate:
    """Update one stored rate. The (house, service code, staff) key is immutable."""
    rate = db.get(PayoutRate, rate_id)
    if rate is None:
        raise RateNotFoundError(rate_id)
    edit = RateEdit(
        house_id=rate.house_id,
        service_code_id=rate.service_code_id,
        staff_id=rate.staff_id,
        percentage=percentage,
    )
    return apply_rate_batch(db, [edit])[0]


def rate_matrix(rates: Iterable) -> Dict[Pair, Dict[int, Decimal]]:
    """Group rates as {(house_id, service_code_id): {staff_id: percentage}}."""
    matrix: Dict[Pair, Dict[int, Decimal]] = {}
    for r in rates:
        matrix.setdefault((r.house_id, r.service_code_id), {})[r.staff_id] = to_decimal(r.percentage)
    return matrix
