from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple


class Step(Enum):
    """Stages of the financial interview."""
    INTRODUCTION = "INTRO"
    ASK_INCOME = "ASK_INCOME"
    ASK_CATEGORIES = "ASK_CATEGORIES"
    ASK_EXPENSES = "ASK_EXPENSES"
    ASK_SAVINGS_GOAL_BOOL = "ASK_SAVINGS_BOOL"
    ASK_SAVINGS_GOAL_DETAILS = "ASK_SAVINGS_DETAILS"
    ASK_EXTRA_PURCHASE_BOOL = "ASK_EXTRA_BOOL"
    ASK_EXTRA_PURCHASE_DETAILS = "ASK_EXTRA_DETAILS"
    COMPLETED = "COMPLETED"

    @property
    def is_terminal(self) -> bool:
        return self is Step.COMPLETED


class Speaker(Enum):
    USER = "user"
    ADVISOR = "advisor"


@dataclass
class Expense:
    category: str
    amount: float


@dataclass
class SavingsGoal:
    name: str
    target_amount: float
    target_date: date
    monthly_contribution: float


@dataclass
class ExtraPurchase:
    name: str
    cost: float
    affordable: bool
    remaining_budget: Optional[float] = None
    shortfall: Optional[float] = None

    def __post_init__(self):
        if self.affordable and (self.remaining_budget is None or self.shortfall is not None):
            raise ValueError("An affordable purchase carries remaining_budget only")
        if not self.affordable and (self.shortfall is None or self.remaining_budget is not None):
            raise ValueError("An unaffordable purchase carries shortfall only")


@dataclass
class Affordability:
    affordable: bool
    remaining_budget: Optional[float] = None
    shortfall: Optional[float] = None


@dataclass
class BudgetSummary:
    income: float
    total_expenses: float
    savings_monthly: float
    disposable_income: float
    distribution: List[Tuple[str, float]] = field(default_factory=list)


@dataclass
class FinancialRecord:
    """Everything the interview has collected so far.

    One instance per session. Only the session controller replaces it, with
    the copy returned by the state machine after each turn.
    """
    income: float = 0.0
    categories: List[str] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    savings_goal: Optional[SavingsGoal] = None
    extra_purchase: Optional[ExtraPurchase] = None
    step: Step = Step.INTRODUCTION

    @property
    def pending_category(self) -> Optional[str]:
        """Category whose amount is asked next, or None once all are filled."""
        if len(self.expenses) < len(self.categories):
            return self.categories[len(self.expenses)]
        return None

    @property
    def expenses_complete(self) -> bool:
        return bool(self.categories) and len(self.expenses) == len(self.categories)

    @property
    def total_expenses(self) -> float:
        return sum(expense.amount for expense in self.expenses)

    def copy(self) -> "FinancialRecord":
        return replace(
            self,
            categories=list(self.categories),
            expenses=[replace(expense) for expense in self.expenses],
            savings_goal=replace(self.savings_goal) if self.savings_goal else None,
            extra_purchase=replace(self.extra_purchase) if self.extra_purchase else None,
        )


@dataclass(frozen=True)
class ConversationTurn:
    speaker: Speaker
    text: str
    timestamp: datetime = field(default_factory=datetime.now)
