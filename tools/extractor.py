import logging
from typing import Any, Dict, Optional, Protocol, Type, TypeVar
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel
from core import prompts
from models.extraction import (
    CategoriesExtraction,
    DecisionExtraction,
    ExpenseAmountExtraction,
    ExtraPurchaseExtraction,
    IncomeExtraction,
    SavingsGoalExtraction,
)

logger = logging.getLogger(__name__)

ShapeT = TypeVar("ShapeT", bound=BaseModel)

EXTRACTION_TEMPLATES = {
    IncomeExtraction: prompts.EXTRACT_INCOME,
    CategoriesExtraction: prompts.EXTRACT_CATEGORIES,
    ExpenseAmountExtraction: prompts.EXTRACT_EXPENSE_AMOUNT,
    DecisionExtraction: prompts.EXTRACT_DECISION,
    SavingsGoalExtraction: prompts.EXTRACT_SAVINGS_GOAL,
    ExtraPurchaseExtraction: prompts.EXTRACT_EXTRA_PURCHASE,
}


class Extractor(Protocol):
    async def extract(
        self, text: str, shape: Type[ShapeT], context: Optional[Dict[str, Any]] = None
    ) -> Optional[ShapeT]:
        """Return a ``shape`` instance, or None when nothing usable was found."""
        ...


class LLMExtractor:
    """Structured-output extraction backed by a chat model."""

    def __init__(self, llm):
        self.llm = llm
        self._runnables = {}

    def _runnable(self, shape: Type[BaseModel]):
        if shape not in self._runnables:
            self._runnables[shape] = self.llm.with_structured_output(shape)
        return self._runnables[shape]

    def build_messages(self, text: str, shape: Type[BaseModel], context: Optional[Dict[str, Any]] = None):
        template = EXTRACTION_TEMPLATES.get(shape)
        if template is None:
            raise KeyError(f"No extraction template for {shape.__name__}")
        return [
            SystemMessage(content=prompts.EXTRACTION_SYSTEM),
            HumanMessage(content=template.format(text=text, **(context or {}))),
        ]

    async def extract(self, text, shape, context=None):
        messages = self.build_messages(text, shape, context)
        try:
            result = await self._runnable(shape).ainvoke(messages)
        except Exception as e:
            logger.warning(f"{shape.__name__} extraction failed: {str(e)}")
            return None
        if isinstance(result, dict):
            try:
                result = shape.model_validate(result)
            except Exception as e:
                logger.warning(f"{shape.__name__} extraction returned malformed data: {str(e)}")
                return None
        if not isinstance(result, shape):
            logger.warning(f"{shape.__name__} extraction returned nothing usable")
            return None
        logger.debug(f"Extracted {shape.__name__}: {result.model_dump()}")
        return result
