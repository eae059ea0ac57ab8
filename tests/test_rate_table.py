from decimal import Decimal
from types import SimpleNamespace

from app.services.rate_table import RateEdit, RateTotalExceededError, rate_matrix, validate_rates


def _edit(house_id, service_code_id, staff_id, pct):
    return RateEdit(house_id=house_id, service_code_id=service_code_id, staff_id=staff_id, percentage=Decimal(pct))


def _stored(house_id, service_code_id, staff_id, pct):
    return SimpleNamespace(
        house_id=house_id, service_code_id=service_code_id, staff_id=staff_id, percentage=Decimal(pct)
    )


def test_exactly_100_is_valid():
    edits = [_edit(1, 1, 1, "60.00"), _edit(1, 1, 2, "40.00")]

    assert validate_rates(edits) == []


def test_over_100_reports_the_pair():
    edits = [_edit(1, 1, 1, "40"), _edit(1, 1, 2, "40"), _edit(1, 1, 3, "30")]

    violations = validate_rates(edits)

    assert len(violations) == 1
    assert (violations[0].house_id, violations[0].service_code_id) == (1, 1)
    assert violations[0].total == Decimal("110.00")


def test_one_cent_over_is_rejected():
    edits = [_edit(1, 1, 1, "50.00"), _edit(1, 1, 2, "50.01")]

    assert len(validate_rates(edits)) == 1


def test_pairs_are_checked_independently():
    edits = [
        _edit(1, 1, 1, "100.00"),
        _edit(1, 2, 1, "70.00"),
        _edit(1, 2, 2, "31.00"),
        _edit(2, 1, 1, "100.00"),
    ]

    violations = validate_rates(edits)

    assert [(v.house_id, v.service_code_id) for v in violations] == [(1, 2)]


def test_edit_overlays_existing_rows():
    existing = [_stored(1, 1, 1, "50.00"), _stored(1, 1, 2, "40.00")]

    # raising staff 2 to 51 pushes the stored pair to 101
    assert len(validate_rates([_edit(1, 1, 2, "51.00")], existing)) == 1
    # lowering staff 1 to make room is fine
    assert validate_rates([_edit(1, 1, 1, "10.00"), _edit(1, 1, 2, "90.00")], existing) == []


def test_untouched_pairs_are_not_reported():
    existing = [_stored(5, 5, 1, "100.00"), _stored(5, 5, 2, "20.00")]

    assert validate_rates([_edit(1, 1, 1, "10.00")], existing) == []


def test_all_zero_pair_is_valid():
    edits = [_edit(1, 1, 1, "0"), _edit(1, 1, 2, "0")]

    assert validate_rates(edits) == []


def test_error_message_names_offending_pairs():
    err = RateTotalExceededError(validate_rates([_edit(3, 4, 1, "60"), _edit(3, 4, 2, "60")]))

    assert "house 3/service code 4" in str(err)
    assert err.violations[0].as_dict()["total_percentage"] == "120.00"


def test_rate_matrix_groups_by_pair():
    matrix = rate_matrix([_stored(1, 1, 1, "10"), _stored(1, 1, 2, "20"), _stored(2, 1, 1, "5")])

    assert matrix == {
        (1, 1): {1: Decimal("10"), 2: Decimal("20")},
        (2, 1): {1: Decimal("5")},
    }
