"""
Daily and period aggregation of revenue entries and their payouts.

Entries can be bucketed by service date ("date") or by check date
("check_date"); the dashboard's "last check" view is the check-date bucket
for the most recent check date on record.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from app.core.money import ZERO, quantize_money, sum_money

DATE_FIELDS = ("date", "check_date")


@dataclass
class StaffPayoutTotal:
    staff_id: int
    staff_name: str
    entries: int = 0
    total_payout: Decimal = ZERO


@dataclass
class DailyReport:
    day: date
    by: str
    entry_ids: List[int]
    entry_count: int
    revenue_total: Decimal
    payout_total: Decimal
    retained_total: Decimal
    payouts_by_staff: List[StaffPayoutTotal] = field(default_factory=list)


@dataclass
class PeriodReport:
    start: date
    end: date
    by: str
    days: List[DailyReport]
    revenue_total: Decimal
    payout_total: Decimal
    retained_total: Decimal
    expense_total: Decimal
    net_total: Decimal


def _day_of(entry, by: str) -> Optional[date]:
    if by not in DATE_FIELDS:
        raise ValueError(f"by must be one of {DATE_FIELDS}")
    return getattr(entry, by)


def payouts_by_staff(payouts: Iterable, staff_names: Dict[int, str]) -> List[StaffPayoutTotal]:
    totals: Dict[int, StaffPayoutTotal] = {}
    for p in payouts:
        row = totals.get(p.staff_id)
        if row is None:
            row = StaffPayoutTotal(staff_id=p.staff_id, staff_name=staff_names.get(p.staff_id, "Unknown"))
            totals[p.staff_id] = row
        row.entries += 1
        row.total_payout = quantize_money(row.total_payout + p.amount)
    return sorted(totals.values(), key=lambda r: (r.staff_name, r.staff_id))


def build_daily_report(
    day: date,
    entries: Iterable,
    payouts: Iterable,
    staff_names: Dict[int, str],
    by: str = "date",
) -> DailyReport:
    day_entries = sorted((e for e in entries if _day_of(e, by) == day), key=lambda e: e.id)
    ids = {e.id for e in day_entries}
    day_payouts = [p for p in payouts if p.revenue_entry_id in ids]

    revenue = sum_money(e.amount for e in day_entries)
    paid_out = sum_money(p.amount for p in day_payouts)
    return DailyReport(
        day=day,
        by=by,
        entry_ids=[e.id for e in day_entries],
        entry_count=len(day_entries),
        revenue_total=revenue,
        payout_total=paid_out,
        retained_total=quantize_money(revenue - paid_out),
        payouts_by_staff=payouts_by_staff(day_payouts, staff_names),
    )


def build_period_report(
    start: date,
    end: date,
    entries: Iterable,
    payouts: Iterable,
    staff_names: Dict[int, str],
    expenses: Iterable = (),
    by: str = "date",
) -> PeriodReport:
    if end < start:
        raise ValueError("end must not be before start")

    in_range = [e for e in entries if _day_of(e, by) is not None and start <= _day_of(e, by) <= end]
    payouts = list(payouts)
    days = sorted({_day_of(e, by) for e in in_range})
    daily = [build_daily_report(d, in_range, payouts, staff_names, by=by) for d in days]

    revenue = sum_money(d.revenue_total for d in daily)
    paid_out = sum_money(d.payout_total for d in daily)
    expense_total = sum_money(x.amount for x in expenses if start <= x.date <= end)
    return PeriodReport(
        start=start,
        end=end,
        by=by,
        days=daily,
        revenue_total=revenue,
        payout_total=paid_out,
        retained_total=quantize_money(revenue - paid_out),
        expense_total=expense_total,
        net_total=quantize_money(revenue - paid_out - expense_total),
    )


def latest_check_date(entries: Iterable) -> Optional[date]:
    dates = [e.check_date for e in entries if e.check_date is not None]
    return max(dates) if dates else None
