"""
Check reconciliation (audit).

Compares a tracked check against the revenue entries carrying the same check
number. Read-only: neither the check nor the entries are modified, and an
unmatched check is a reportable state, not an error.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from app.core.money import BALANCE_TOLERANCE, quantize_money, sum_money, to_decimal

BALANCED = "balanced"
CHECK_EXCEEDS_REVENUE = "check_exceeds_revenue"
REVENUE_EXCEEDS_CHECK = "revenue_exceeds_check"


@dataclass
class AuditEntryLine:
    id: int
    date: object
    check_date: object
    amount: Decimal
    house_id: int
    service_code_id: int
    patient_id: Optional[int]
    house_name: Optional[str] = None
    service_code: Optional[str] = None
    patient_name: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class AuditReport:
    check_id: int
    check_number: str
    service_provider: str
    check_amount: Decimal
    revenue_total: Decimal
    difference: Decimal
    balanced: bool
    status: str
    message: str
    matching_count: int
    entries: List[AuditEntryLine] = field(default_factory=list)


def _classify(difference: Decimal) -> str:
    if abs(difference) < BALANCE_TOLERANCE:
        return BALANCED
    return CHECK_EXCEEDS_REVENUE if difference > 0 else REVENUE_EXCEEDS_CHECK


def _message(status: str, difference: Decimal, matching_count: int) -> str:
    if status == BALANCED:
        return "Check amount matches recorded revenue."
    if matching_count == 0:
        return f"No revenue entries recorded for this check; {difference} is unreconciled."
    if status == CHECK_EXCEEDS_REVENUE:
        return f"Check exceeds recorded revenue by {difference}. Missing revenue entries?"
    return f"Recorded revenue exceeds check by {abs(difference)}. Possible duplicate or incorrect entries?"


def matching_entries(check_number: str, entries: Iterable) -> list:
    # Exact, case-sensitive match; entries without a check number never match
    return [e for e in entries if e.check_number is not None and e.check_number == check_number]


def reconcile(
    check,
    entries: Iterable,
    houses: Optional[Mapping[int, str]] = None,
    service_codes: Optional[Mapping[int, str]] = None,
    patients: Optional[Mapping[int, str]] = None,
) -> AuditReport:
    """
    Build the audit report for one check. `houses`, `service_codes` and
    `patients` map ids to display names used to enrich the matching entries.
    """
    houses = houses or {}
    service_codes = service_codes or {}
    patients = patients or {}

    matches = sorted(matching_entries(check.check_number, entries), key=lambda e: (e.date, e.id))
    check_amount = quantize_money(check.check_amount)
    revenue_total = sum_money(e.amount for e in matches)
    difference = quantize_money(check_amount - revenue_total)
    status = _classify(difference)

    lines = [
        AuditEntryLine(
            id=e.id,
            date=e.date,
            check_date=e.check_date,
            amount=quantize_money(to_decimal(e.amount)),
            house_id=e.house_id,
            service_code_id=e.service_code_id,
            patient_id=e.patient_id,
            house_name=houses.get(e.house_id),
            service_code=service_codes.get(e.service_code_id),
            patient_name=patients.get(e.patient_id) if e.patient_id is not None else None,
            notes=e.notes,
        )
        for e in matches
    ]

    return AuditReport(
        check_id=check.id,
        check_number=check.check_number,
        service_provider=check.service_provider,
        check_amount=check_amount,
        revenue_total=revenue_total,
        difference=difference,
        balanced=status == BALANCED,
        status=status,
        message=_message(status, difference, len(matches)),
        matching_count=len(matches),
        entries=lines,
    )


def reconcile_all(
    checks: Iterable,
    entries: Iterable,
    houses: Optional[Mapping[int, str]] = None,
    service_codes: Optional[Mapping[int, str]] = None,
    patients: Optional[Mapping[int, str]] = None,
) -> List[AuditReport]:
    """Reports for many checks computed from one snapshot of the entries."""
    by_number: Dict[str, list] = {}
    for e in entries:
        if e.check_number is not None:
            by_number.setdefault(e.check_number, []).append(e)
    return [
        reconcile(c, by_number.get(c.check_number, []), houses, service_codes, patients)
        for c in checks
    ]
