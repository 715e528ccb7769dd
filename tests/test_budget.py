from decimal import Decimal

import pytest

from budget_ledger.budget import BudgetPolicy, BudgetStatus, classify
from budget_ledger.core.errors import ValidationError
from budget_ledger.core.models import Kind
from budget_ledger.store import RecordStore


@pytest.mark.parametrize(
    "spent, expected",
    [
        (1000, BudgetStatus.WITHIN),
        (800, BudgetStatus.WITHIN),
        (850, BudgetStatus.APPROACHING),
        (1001, BudgetStatus.EXCEEDED),
        (0, BudgetStatus.WITHIN),
    ],
)
def test_classify_against_limit(spent, expected):
    # the limit itself is still within budget
    assert classify(spent, 1000) is expected


def test_zero_limit_disables():
    assert classify(5000, 0) is BudgetStatus.DISABLED
    assert BudgetPolicy().classify(5000) is BudgetStatus.DISABLED
    assert not BudgetPolicy().enabled


def test_policy_set_validates():
    policy = BudgetPolicy()
    assert policy.set("1500") == Decimal("1500.00")
    assert policy.enabled
    with pytest.raises(ValidationError):
        policy.set(-1)
    with pytest.raises(ValidationError):
        policy.set("lots")
    assert policy.limit == Decimal("1500.00")
    assert policy.set(0) == 0
    assert not policy.enabled


def test_status_for_month():
    store = RecordStore(strict=False)
    store.add(Kind.EXPENSE, "Grocery", 900, "1/5/2024")
    store.add(Kind.EXPENSE, "Grocery", 900, "1/6/2024")
    store.add(Kind.EXPENSE, "Grocery", 200, "2/6/2024")
    policy = BudgetPolicy(1000)
    assert policy.status_for(store, 5, 2024) is BudgetStatus.APPROACHING
    assert policy.status_for(store, 6, 2024) is BudgetStatus.EXCEEDED
    assert policy.status_for(store, 7, 2024) is BudgetStatus.WITHIN


def test_spending_exactly_the_limit_is_within():
    store = RecordStore(strict=False)
    store.add(Kind.EXPENSE, "Grocery", 600, "1/5/2024")
    store.add(Kind.EXPENSE, "Utilities", 400, "3/5/2024")
    policy = BudgetPolicy(1000)
    assert policy.status_for(store, 5, 2024) is BudgetStatus.WITHIN
    assert policy.classify(Decimal("999.99")) is BudgetStatus.APPROACHING
    assert policy.classify(Decimal("1000.01")) is BudgetStatus.EXCEEDED


def test_policy_set_rejects_overflowing_limit():
    policy = BudgetPolicy(250)
    with pytest.raises(ValidationError):
        policy.set("1e40")
    assert policy.limit == Decimal("250.00")


def test_policy_set_rounds_half_up():
    assert BudgetPolicy("10.005").limit == Decimal("10.01")
