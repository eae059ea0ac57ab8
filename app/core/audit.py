from typing import Optional

from app.models.audit_log import AuditLog
from sqlalchemy.orm import Session


def _compute_risk_level(action: str, explicit: Optional[str] = None) -> str:
    if explicit:
        return explicit
    if action == "payouts_failed":
        return "high"
    if action == "deleted":
        return "medium"
    return "low"


def log_audit(
    db: Session,
    *,
    action: str,
    entity_type: str,
    entity_id: str,
    source: str = "api",
    status: Optional[str] = None,
    description: Optional[str] = None,
    risk_level: Optional[str] = None,
) -> AuditLog:
    log = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        source=source,
        status=status,
        description=description,
        risk_level=_compute_risk_level(action, risk_level),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log
