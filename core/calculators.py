import logging
from datetime import date
from models.data_models import Affordability, BudgetSummary, FinancialRecord

logger = logging.getLogger(__name__)

SAVINGS_SLICE = "Ahorro Meta"
AVAILABLE_SLICE = "Disponible"


def months_between(target: date, now: date) -> int:
    """Whole calendar months from ``now`` to ``target``; days are ignored."""
    return (target.year - now.year) * 12 + (target.month - now.month)


def monthly_contribution(target_amount: float, target_date: date, now: date) -> float:
    months = months_between(target_date, now)
    if months < 1:
        # Past or current-month deadlines are treated as a one-month horizon
        logger.warning(f"Savings target date {target_date} is not after {now:%Y-%m}; using a 1-month horizon")
    return target_amount / max(1, months)


def disposable_income(record: FinancialRecord) -> float:
    savings = record.savings_goal.monthly_contribution if record.savings_goal else 0.0
    return record.income - record.total_expenses - savings


def affordability(disposable: float, cost: float) -> Affordability:
    if disposable >= cost:
        return Affordability(affordable=True, remaining_budget=disposable - cost)
    return Affordability(affordable=False, shortfall=cost - disposable)


def budget_summary(record: FinancialRecord) -> BudgetSummary:
    savings = record.savings_goal.monthly_contribution if record.savings_goal else 0.0
    remaining = disposable_income(record)
    slices = [(expense.category, expense.amount) for expense in record.expenses]
    slices.append((SAVINGS_SLICE, savings))
    slices.append((AVAILABLE_SLICE, max(remaining, 0.0)))
    return BudgetSummary(
        income=record.income,
        total_expenses=record.total_expenses,
        savings_monthly=savings,
        disposable_income=remaining,
        distribution=[(label, value) for label, value in slices if value > 0],
    )
