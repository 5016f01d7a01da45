# models/extraction.py
from typing import List
from pydantic import BaseModel, Field


class IncomeExtraction(BaseModel):
    income: float = Field(description="Monthly net income in Soles")


class CategoriesExtraction(BaseModel):
    categories: List[str] = Field(default_factory=list, description="Expense category names, in the order given")


class ExpenseAmountExtraction(BaseModel):
    amount: float = Field(description="Monthly amount spent on the category, in Soles")


class DecisionExtraction(BaseModel):
    decision: bool = Field(description="True if the user answers yes, False for no")


class SavingsGoalExtraction(BaseModel):
    name: str = Field(description="Name of the savings goal")
    target_amount: float = Field(description="Total amount to save, in Soles")
    target_date: str = Field(description="Deadline as YYYY-MM-DD, relative phrasing already resolved")


class ExtraPurchaseExtraction(BaseModel):
    name: str = Field(description="Product or service to buy")
    cost: float = Field(description="Approximate cost in Soles")


EXTRACTION_SHAPES = (
    IncomeExtraction,
    CategoriesExtraction,
    ExpenseAmountExtraction,
    DecisionExtraction,
    SavingsGoalExtraction,
    ExtraPurchaseExtraction,
)
