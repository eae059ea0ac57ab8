from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.reporting import build_daily_report, build_period_report, latest_check_date

STAFF = {1: "Ann", 2: "Ben"}


def _entry(entry_id, day, amount, check_date=None):
    return SimpleNamespace(id=entry_id, date=day, check_date=check_date, amount=Decimal(amount))


def _payout(entry_id, staff_id, amount):
    return SimpleNamespace(revenue_entry_id=entry_id, staff_id=staff_id, amount=Decimal(amount))


ENTRIES = [
    _entry(1, date(2026, 5, 1), "100.00", check_date=date(2026, 5, 15)),
    _entry(2, date(2026, 5, 1), "50.00", check_date=date(2026, 5, 15)),
    _entry(3, date(2026, 5, 2), "80.00", check_date=date(2026, 5, 29)),
    _entry(4, date(2026, 5, 3), "20.00"),
]
PAYOUTS = [
    _payout(1, 1, "15.00"),
    _payout(1, 2, "6.00"),
    _payout(2, 1, "7.50"),
    _payout(3, 2, "8.00"),
]


def test_daily_report_by_service_date():
    report = build_daily_report(date(2026, 5, 1), ENTRIES, PAYOUTS, STAFF)

    assert report.entry_ids == [1, 2]
    assert report.revenue_total == Decimal("150.00")
    assert report.payout_total == Decimal("28.50")
    assert report.retained_total == Decimal("121.50")
    assert [(s.staff_name, s.entries, s.total_payout) for s in report.payouts_by_staff] == [
        ("Ann", 2, Decimal("22.50")),
        ("Ben", 1, Decimal("6.00")),
    ]


def test_daily_report_by_check_date():
    report = build_daily_report(date(2026, 5, 29), ENTRIES, PAYOUTS, STAFF, by="check_date")

    assert report.entry_ids == [3]
    assert report.payout_total == Decimal("8.00")


def test_empty_day():
    report = build_daily_report(date(2026, 6, 1), ENTRIES, PAYOUTS, STAFF)

    assert report.entry_count == 0
    assert report.revenue_total == Decimal("0.00")
    assert report.payouts_by_staff == []


def test_period_report_buckets_and_totals():
    expenses = [
        SimpleNamespace(date=date(2026, 5, 2), amount=Decimal("30.00")),
        SimpleNamespace(date=date(2026, 6, 2), amount=Decimal("999.00")),
    ]

    report = build_period_report(date(2026, 5, 1), date(2026, 5, 2), ENTRIES, PAYOUTS, STAFF, expenses=expenses)

    assert [d.day for d in report.days] == [date(2026, 5, 1), date(2026, 5, 2)]
    assert report.revenue_total == Decimal("230.00")
    assert report.payout_total == Decimal("36.50")
    assert report.expense_total == Decimal("30.00")
    assert report.net_total == Decimal("163.50")


def test_period_by_check_date_skips_entries_without_one():
    report = build_period_report(
        date(2026, 5, 1), date(2026, 5, 31), ENTRIES, PAYOUTS, STAFF, by="check_date"
    )

    assert [d.day for d in report.days] == [date(2026, 5, 15), date(2026, 5, 29)]
    assert report.revenue_total == Decimal("230.00")


def test_period_rejects_inverted_range():
    with pytest.raises(ValueError):
        build_period_report(date(2026, 5, 2), date(2026, 5, 1), ENTRIES, PAYOUTS, STAFF)


def test_latest_check_date():
    assert latest_check_date(ENTRIES) == date(2026, 5, 29)
    assert latest_check_date([_entry(9, date(2026, 1, 1), "1.00")]) is None
