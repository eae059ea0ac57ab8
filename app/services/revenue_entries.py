"""
Revenue entry lifecycle.

Writing an entry is a two-phase operation: the entry itself is committed
first, then `recompute_payouts` replaces its payout rows. The replacement is
one transaction (delete old rows, insert new ones) and is idempotent, so a
failed recompute leaves the previous payout set in place and can simply be
retried. A payout failure never rolls back the entry.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.audit import log_audit
from app.models.payout import Payout
from app.models.payout_rate import PayoutRate
from app.models.revenue_entry import RevenueEntry
from app.models.staff import Staff
from app.services.payout_calculator import PayoutLine, compute_payouts, persistable
from app.services.references import require_house, require_patient, require_service_code

logger = logging.getLogger(__name__)


class RevenueEntryNotFoundError(Exception):
    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Revenue entry {entry_id} not found")


class PayoutRecomputeError(Exception):
    """Raised when payout rows could not be replaced for an entry that was saved."""
    def __init__(self, entry_id: int, cause: Exception):
        self.entry_id = entry_id
        self.cause = cause
        super().__init__(f"Payouts for revenue entry {entry_id} could not be recomputed: {cause}")


@dataclass
class EntryWriteResult:
    entry: RevenueEntry
    payouts: List[Payout]
    payouts_error: Optional[str] = None

    @property
    def payouts_status(self) -> str:
        return "failed" if self.payouts_error else "ok"


def load_rate_snapshot(db: Session, house_id: int, service_code_id: int) -> List[PayoutRate]:
    return (
        db.query(PayoutRate)
        .filter(PayoutRate.house_id == house_id, PayoutRate.service_code_id == service_code_id)
        .all()
    )


def load_staff(db: Session) -> List[Staff]:
    # All staff, active or not; unmatched members fall back to 0%
    return db.query(Staff).order_by(Staff.name, Staff.id).all()


def preview_payouts(db: Session, amount: Decimal, house_id: int, service_code_id: int) -> List[PayoutLine]:
    """Every staff member's line for an unsaved entry, zero lines included."""
    rates = load_rate_snapshot(db, house_id, service_code_id)
    return compute_payouts(amount, house_id, service_code_id, rates, load_staff(db))


def _replace_payouts(db: Session, entry: RevenueEntry, lines: List[PayoutLine]) -> List[Payout]:
    db.query(Payout).filter(Payout.revenue_entry_id == entry.id).delete(synchronize_session=False)
    rows = [
        Payout(
            revenue_entry_id=entry.id,
            staff_id=line.staff_id,
            amount=line.amount,
            percentage=line.percentage,
        )
        for line in lines
    ]
    db.add_all(rows)
    return rows


def recompute_payouts(db: Session, entry: RevenueEntry) -> List[Payout]:
    """
    Replace the entry's payouts with the ones computed from the current rate
    table. Raises PayoutRecomputeError after rolling back; the entry row and
    its previous payouts are untouched in that case.
    """
    entry_id = entry.id
    try:
        rates = load_rate_snapshot(db, entry.house_id, entry.service_code_id)
        lines = persistable(
            compute_payouts(entry.amount, entry.house_id, entry.service_code_id, rates, load_staff(db))
        )
        rows = _replace_payouts(db, entry, lines)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Payout recompute failed for revenue entry %s", entry_id)
        try:
            log_audit(
                db,
                action="payouts_failed",
                entity_type="revenue_entry",
                entity_id=str(entry_id),
                source="system",
                status="failed",
                description=f"Payout recompute failed: {e}",
            )
        except SQLAlchemyError:
            # the recompute failure below is still the error callers see
            db.rollback()
            logger.exception("Could not audit payout failure for revenue entry %s", entry_id)
        raise PayoutRecomputeError(entry_id, e) from e

    db.expire(entry, ["payouts"])
    for row in rows:
        db.refresh(row)
    logger.info("Recomputed %d payouts for revenue entry %s", len(rows), entry_id)
    return rows


def _recompute_after_write(db: Session, entry: RevenueEntry) -> EntryWriteResult:
    try:
        payouts = recompute_payouts(db, entry)
    except PayoutRecomputeError as e:
        db.refresh(entry)
        return EntryWriteResult(entry=entry, payouts=[], payouts_error=str(e))
    db.refresh(entry)
    return EntryWriteResult(entry=entry, payouts=payouts)


def get_entry(db: Session, entry_id: int) -> RevenueEntry:
    entry = db.get(RevenueEntry, entry_id)
    if entry is None:
        raise RevenueEntryNotFoundError(entry_id)
    return entry


def create_entry(db: Session, data: Dict[str, Any]) -> EntryWriteResult:
    require_house(db, data["house_id"])
    require_service_code(db, data["service_code_id"])
    require_patient(db, data.get("patient_id"))

    entry = RevenueEntry(**data)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Created revenue entry %s amount=%s", entry.id, entry.amount)

    return _recompute_after_write(db, entry)


def update_entry(db: Session, entry_id: int, data: Dict[str, Any]) -> EntryWriteResult:
    entry = get_entry(db, entry_id)

    if data.get("house_id") is not None:
        require_house(db, data["house_id"])
    if data.get("service_code_id") is not None:
        require_service_code(db, data["service_code_id"])
    if "patient_id" in data:
        require_patient(db, data["patient_id"])

    for k, v in data.items():
        setattr(entry, k, v)
    db.commit()
    db.refresh(entry)
    logger.info("Updated revenue entry %s fields=%s", entry.id, sorted(data))

    # Every save recomputes so payouts follow the rate table as of this save
    return _recompute_after_write(db, entry)


def delete_entry(db: Session, entry_id: int) -> Dict[str, Any]:
    """Delete the entry and all its payouts in one transaction. Returns a summary of the removed row."""
    entry = get_entry(db, entry_id)
    summary = {"id": entry.id, "amount": entry.amount, "date": entry.date, "check_number": entry.check_number}
    try:
        db.query(Payout).filter(Payout.revenue_entry_id == entry_id).delete(synchronize_session=False)
        db.delete(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete revenue entry %s", entry_id)
        raise
    logger.info("Deleted revenue entry %s and its payouts", entry_id)
    return summary


def retry_payouts(db: Session, entry_id: int) -> List[Payout]:
    """Re-run the recompute command for an entry, e.g. after a failed save."""
    return recompute_payouts(db, get_entry(db, entry_id))
