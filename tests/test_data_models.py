"""
Tests for the financial record and its value types
"""
from datetime import date

import pytest

from models.data_models import Expense, ExtraPurchase, FinancialRecord, SavingsGoal, Step


def test_new_record_defaults():
    record = FinancialRecord()
    assert record.step is Step.INTRODUCTION
    assert record.income == 0
    assert record.categories == [] and record.expenses == []
    assert record.savings_goal is None and record.extra_purchase is None
    assert not record.expenses_complete


def test_pending_category_walks_the_category_order():
    record = FinancialRecord(categories=["Alquiler", "Comida"])
    assert record.pending_category == "Alquiler"
    record.expenses.append(Expense("Alquiler", 900))
    assert record.pending_category == "Comida"
    record.expenses.append(Expense("Comida", 300))
    assert record.pending_category is None
    assert record.expenses_complete
    assert record.total_expenses == 1200


def test_copy_is_independent():
    record = FinancialRecord(
        income=1000,
        categories=["Comida"],
        expenses=[Expense("Comida", 200)],
        savings_goal=SavingsGoal("Viaje", 600, date(2026, 7, 1), 100.0),
    )
    clone = record.copy()
    clone.categories.append("Otro")
    clone.expenses[0].amount = 999
    clone.savings_goal.name = "Otro"

    assert record == FinancialRecord(
        income=1000,
        categories=["Comida"],
        expenses=[Expense("Comida", 200)],
        savings_goal=SavingsGoal("Viaje", 600, date(2026, 7, 1), 100.0),
    )


@pytest.mark.parametrize(
    "kwargs",
    [
        {"affordable": True, "remaining_budget": None},
        {"affordable": True, "remaining_budget": 10, "shortfall": 5},
        {"affordable": False, "shortfall": None},
        {"affordable": False, "shortfall": 5, "remaining_budget": 10},
    ],
)
def test_extra_purchase_requires_exactly_one_outcome(kwargs):
    with pytest.raises(ValueError):
        ExtraPurchase(name="Laptop", cost=100, **kwargs)


def test_only_completed_is_terminal():
    assert [step for step in Step if step.is_terminal] == [Step.COMPLETED]
