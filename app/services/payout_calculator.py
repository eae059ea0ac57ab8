"""
Payout calculator.

Pure computation of per-staff commission lines for a revenue amount. The
rate table is passed in as a snapshot so callers decide which version of it
applies (the live preview and the save path both read it right before calling).
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol

from app.core.money import HUNDRED, TWO_PLACES, ZERO, percent_of, quantize_money, sum_money, to_decimal


class RateLike(Protocol):
    house_id: int
    service_code_id: int
    staff_id: int
    percentage: Decimal


class StaffLike(Protocol):
    id: int
    name: str


@dataclass(frozen=True)
class PayoutLine:
    staff_id: int
    percentage: Decimal
    amount: Decimal
    staff_name: Optional[str] = None


def rates_for(
    rates: Iterable[RateLike], house_id: int, service_code_id: int
) -> dict:
    """Map staff_id -> percentage for one (house, service code) pair."""
    return {
        r.staff_id: to_decimal(r.percentage)
        for r in rates
        if r.house_id == house_id and r.service_code_id == service_code_id
    }


def _trim_to_amount(amount: Decimal, exact: List[Decimal], rounded: List[Decimal]) -> List[Decimal]:
    # Half-up rounding can push the sum a few cents past `amount`; take one cent
    # at a time off the line rounded up the most, earliest line on ties.
    rounded = list(rounded)
    excess = sum_money(rounded) - amount
    while excess > 0:
        i = max(range(len(rounded)), key=lambda k: (rounded[k] - exact[k], -k))
        rounded[i] -= TWO_PLACES
        excess -= TWO_PLACES
    return rounded


def compute_payouts(
    amount: Decimal,
    house_id: int,
    service_code_id: int,
    rates: Iterable[RateLike],
    staff: Iterable[StaffLike],
) -> List[PayoutLine]:
    """
    One line per staff member (active or not). Staff without a matching rate
    get 0%. Amounts are rounded half-up to cents, so 100.00 at 33.33% is 33.33.

    The total never exceeds `amount`: if rounding overshoots (99.99 at
    33.33/33.33/33.34), cents are taken back from the lines with the largest
    rounding-up residue, the earlier staff member first on ties. Any
    remainder below `amount` is retained.
    """
    amount = to_decimal(amount)
    if amount < 0:
        raise ValueError("amount must be non-negative")

    applicable = rates_for(rates, house_id, service_code_id)

    members = list(staff)
    pcts = [quantize_money(applicable.get(m.id, ZERO)) for m in members]
    exact = [amount * pct / HUNDRED for pct in pcts]
    amounts = _trim_to_amount(amount, exact, [percent_of(amount, pct) for pct in pcts])

    return [
        PayoutLine(staff_id=m.id, staff_name=m.name, percentage=pct, amount=amt)
        for m, pct, amt in zip(members, pcts, amounts)
    ]


def persistable(lines: Iterable[PayoutLine]) -> List[PayoutLine]:
    """Only nonzero-rate lines become Payout rows; the preview keeps them all."""
    return [line for line in lines if line.percentage > 0]


def total_payout(lines: Iterable[PayoutLine]) -> Decimal:
    return sum_money(line.amount for line in lines)
