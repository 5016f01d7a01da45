import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Dict, Optional, Tuple
from core.calculators import budget_summary
from core.exceptions import InvalidStateError
from core.settings import Settings, get_model, settings as default_settings
from memory.conversation_log import ConversationLog
from models.data_models import ConversationTurn, FinancialRecord, Speaker, Step
from tools.extractor import Extractor, LLMExtractor
from tools.responder import LLMResponder, Responder
from workflow.graph import AdvisorTurnGraph
from workflow.state_machine import InterviewStateMachine

logger = logging.getLogger(__name__)


class FinancialAdvisorSession:
    """Runs one interview, one turn at a time.

    The session owns the financial record and the conversation log. A turn
    is committed only after the turn graph has produced both the transition
    and the advisor reply.
    """

    def __init__(self, extractor: Optional[Extractor] = None, responder: Optional[Responder] = None,
                 settings: Optional[Settings] = None, clock: Optional[Callable[[], date]] = None):
        self.settings = settings or default_settings
        clock = clock or date.today
        if extractor is None:
            extractor = LLMExtractor(get_model(self.settings.EXTRACTOR_TEMPERATURE, config=self.settings))
        if responder is None:
            responder = LLMResponder(get_model(self.settings.RESPONDER_TEMPERATURE, config=self.settings))

        self.state_machine = InterviewStateMachine(
            extractor, clock=clock, reask_missing_expense=self.settings.REASK_MISSING_EXPENSE
        )
        self.workflow_graph = AdvisorTurnGraph(self.state_machine, responder)
        self.conversation_log = ConversationLog()
        self._record = FinancialRecord()
        self._busy = False
        logger.info("Financial advisor session initialized")

    @property
    def record(self) -> FinancialRecord:
        return self._record.copy()

    @property
    def step(self) -> Step:
        return self._record.step

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def is_completed(self) -> bool:
        return self._record.step.is_terminal

    @property
    def conversation(self) -> Tuple[ConversationTurn, ...]:
        return self.conversation_log.turns

    def _check_can_run(self):
        if self._busy:
            raise InvalidStateError("A turn is already being processed", step=self.step)
        if self.is_completed:
            raise InvalidStateError("The interview is completed", step=self.step)

    async def start(self) -> str:
        """Produce the greeting and move the interview to the income question."""
        self._check_can_run()
        if self.step is not Step.INTRODUCTION:
            raise InvalidStateError("The interview has already started", step=self.step)
        self._busy = True
        try:
            final_state = await self.workflow_graph.run(self._record, self.conversation_log.turns)
            self._record = final_state["transition"].record
            response = final_state["final_response"]
            self.conversation_log.add_turn(Speaker.ADVISOR, response)
            return response
        finally:
            self._busy = False

    async def submit_user_turn(self, text: str) -> str:
        self._check_can_run()
        if self.step is Step.INTRODUCTION:
            raise InvalidStateError("Call start() before submitting user turns", step=self.step)
        if not text or not text.strip():
            raise ValueError("Message text must not be empty")

        self._busy = True
        try:
            logger.info(f"Processing user turn in {self.step.value}")
            final_state = await self.workflow_graph.run(self._record, self.conversation_log.turns, text)
            self._record = final_state["transition"].record
            response = final_state["final_response"]
            self.conversation_log.add_interaction(text, response)
            return response
        finally:
            self._busy = False

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view for presentation."""
        return {
            "record": asdict(self._record),
            "summary": asdict(budget_summary(self._record)),
            "conversation": [
                {"speaker": turn.speaker.value, "text": turn.text, "timestamp": turn.timestamp}
                for turn in self.conversation_log.turns
            ],
        }

    def get_conversation_stats(self) -> Dict[str, Any]:
        return {**self.conversation_log.get_stats(), "step": self.step.value}
