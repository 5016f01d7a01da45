"""
Interview state machine.

Each user turn runs exactly one extraction, updates a copy of the financial
record when the extracted value is usable, and picks the next step plus the
directive the responder should phrase. The caller decides whether to commit
the returned record.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional
from dateutil import parser as dtp
from core import calculators, prompts
from core.exceptions import InvalidStateError
from models.data_models import Expense, ExtraPurchase, FinancialRecord, SavingsGoal, Step
from models.extraction import (
    CategoriesExtraction,
    DecisionExtraction,
    ExpenseAmountExtraction,
    ExtraPurchaseExtraction,
    IncomeExtraction,
    SavingsGoalExtraction,
)
from tools.extractor import Extractor

logger = logging.getLogger(__name__)


@dataclass
class Transition:
    record: FinancialRecord
    next_step: Step
    directive: str
    extracted: bool = True


def _parse_target_date(value: str) -> Optional[date]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return dtp.isoparse(value).date()
    except (ValueError, OverflowError):
        pass
    try:
        return dtp.parse(value).date()
    except (ValueError, OverflowError):
        return None


class InterviewStateMachine:
    def __init__(self, extractor: Extractor, clock: Callable[[], date] = date.today,
                 reask_missing_expense: bool = False):
        self.extractor = extractor
        self.clock = clock
        self.reask_missing_expense = reask_missing_expense
        self._handlers = {
            Step.ASK_INCOME: self._handle_income,
            Step.ASK_CATEGORIES: self._handle_categories,
            Step.ASK_EXPENSES: self._handle_expense,
            Step.ASK_SAVINGS_GOAL_BOOL: self._handle_savings_goal_bool,
            Step.ASK_SAVINGS_GOAL_DETAILS: self._handle_savings_goal_details,
            Step.ASK_EXTRA_PURCHASE_BOOL: self._handle_extra_purchase_bool,
            Step.ASK_EXTRA_PURCHASE_DETAILS: self._handle_extra_purchase_details,
        }

    def introduction(self, record: FinancialRecord) -> Transition:
        if record.step is not Step.INTRODUCTION:
            raise InvalidStateError("The interview has already started", step=record.step)
        updated = record.copy()
        updated.step = Step.ASK_INCOME
        return Transition(updated, Step.ASK_INCOME, prompts.INTRODUCTION, extracted=False)

    async def step(self, record: FinancialRecord, user_text: str) -> Transition:
        handler = self._handlers.get(record.step)
        if handler is None:
            raise InvalidStateError(f"No user input is accepted in step {record.step.value}", step=record.step)
        updated = record.copy()
        transition = await handler(updated, user_text)
        transition.record.step = transition.next_step
        if transition.next_step is record.step:
            logger.info(f"Staying in {record.step.value} (extracted={transition.extracted})")
        else:
            logger.info(f"Step {record.step.value} -> {transition.next_step.value}")
        return transition

    async def _decision(self, user_text: str) -> bool:
        result = await self.extractor.extract(user_text, DecisionExtraction)
        return bool(result and result.decision)

    async def _handle_income(self, record, user_text):
        result = await self.extractor.extract(user_text, IncomeExtraction)
        if result is None or result.income <= 0:
            logger.warning("No valid income found in user reply")
            return Transition(record, Step.ASK_INCOME, prompts.INCOME_RETRY, extracted=False)
        record.income = result.income
        return Transition(record, Step.ASK_CATEGORIES, prompts.INCOME_ACCEPTED.format(income=result.income))

    async def _handle_categories(self, record, user_text):
        result = await self.extractor.extract(user_text, CategoriesExtraction)
        categories = [name.strip() for name in result.categories if name and name.strip()] if result else []
        if not categories:
            logger.warning("No expense categories found in user reply")
            return Transition(record, Step.ASK_CATEGORIES, prompts.CATEGORIES_RETRY, extracted=False)
        record.categories = categories
        directive = prompts.CATEGORIES_ACCEPTED.format(categories=", ".join(categories), first=categories[0])
        return Transition(record, Step.ASK_EXPENSES, directive)

    async def _handle_expense(self, record, user_text):
        category = record.pending_category
        result = await self.extractor.extract(user_text, ExpenseAmountExtraction, {"category": category})
        extracted = result is not None and result.amount >= 0
        if not extracted:
            if self.reask_missing_expense:
                logger.warning(f"No amount found for {category}; asking again")
                return Transition(
                    record, Step.ASK_EXPENSES, prompts.EXPENSE_RETRY.format(category=category), extracted=False
                )
            logger.warning(f"No amount found for {category}; recording 0")
        amount = result.amount if extracted else 0.0
        record.expenses.append(Expense(category=category, amount=amount))

        next_category = record.pending_category
        if next_category is not None:
            directive = prompts.EXPENSE_NEXT.format(amount=amount, category=category, next_category=next_category)
            return Transition(record, Step.ASK_EXPENSES, directive, extracted=extracted)
        return Transition(record, Step.ASK_SAVINGS_GOAL_BOOL, prompts.EXPENSES_DONE, extracted=extracted)

    async def _handle_savings_goal_bool(self, record, user_text):
        if await self._decision(user_text):
            return Transition(record, Step.ASK_SAVINGS_GOAL_DETAILS, prompts.SAVINGS_GOAL_WANTED)
        return Transition(record, Step.ASK_EXTRA_PURCHASE_BOOL, prompts.SAVINGS_GOAL_DECLINED)

    async def _handle_savings_goal_details(self, record, user_text):
        today = self.clock()
        result = await self.extractor.extract(user_text, SavingsGoalExtraction, {"today": today.isoformat()})
        target_date = _parse_target_date(result.target_date) if result else None
        if result is None or not result.name.strip() or result.target_amount <= 0 or target_date is None:
            logger.warning("Savings goal details incomplete")
            return Transition(record, Step.ASK_SAVINGS_GOAL_DETAILS, prompts.SAVINGS_GOAL_RETRY, extracted=False)

        contribution = calculators.monthly_contribution(result.target_amount, target_date, today)
        record.savings_goal = SavingsGoal(
            name=result.name.strip(),
            target_amount=result.target_amount,
            target_date=target_date,
            monthly_contribution=contribution,
        )
        directive = prompts.SAVINGS_GOAL_ACCEPTED.format(
            name=record.savings_goal.name, monthly_contribution=contribution
        )
        return Transition(record, Step.ASK_EXTRA_PURCHASE_BOOL, directive)

    async def _handle_extra_purchase_bool(self, record, user_text):
        if await self._decision(user_text):
            return Transition(record, Step.ASK_EXTRA_PURCHASE_DETAILS, prompts.EXTRA_PURCHASE_WANTED)
        return Transition(record, Step.COMPLETED, prompts.FINAL_SUMMARY)

    async def _handle_extra_purchase_details(self, record, user_text):
        result = await self.extractor.extract(user_text, ExtraPurchaseExtraction)
        if result is None or not result.name.strip() or result.cost <= 0:
            logger.warning("Extra purchase details incomplete")
            return Transition(record, Step.ASK_EXTRA_PURCHASE_DETAILS, prompts.EXTRA_PURCHASE_RETRY, extracted=False)

        disposable = calculators.disposable_income(record)
        verdict = calculators.affordability(disposable, result.cost)
        record.extra_purchase = ExtraPurchase(
            name=result.name.strip(),
            cost=result.cost,
            affordable=verdict.affordable,
            remaining_budget=verdict.remaining_budget,
            shortfall=verdict.shortfall,
        )
        if verdict.affordable:
            verdict_text = prompts.VERDICT_AFFORDABLE.format(remaining_budget=verdict.remaining_budget)
        else:
            verdict_text = prompts.VERDICT_UNAFFORDABLE.format(shortfall=verdict.shortfall)
        directive = prompts.EXTRA_PURCHASE_VERDICT.format(
            name=record.extra_purchase.name, cost=result.cost, disposable_income=disposable, verdict=verdict_text
        )
        return Transition(record, Step.COMPLETED, directive)
