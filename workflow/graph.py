import logging
from typing import Optional, Tuple
from typing_extensions import TypedDict
from langgraph.graph import END, StateGraph
from core.prompts import PERSONA_INSTRUCTION, TECHNICAL_APOLOGY
from models.data_models import ConversationTurn, FinancialRecord, Speaker
from tools.responder import Responder
from workflow.state_machine import InterviewStateMachine, Transition

logger = logging.getLogger(__name__)


class TurnState(TypedDict):
    user_text: Optional[str]
    record: FinancialRecord
    history: Tuple[ConversationTurn, ...]
    transition: Optional[Transition]
    final_response: str


class AdvisorTurnGraph:
    """One advisor turn: state-machine transition, then the phrased reply.

    A state with ``user_text`` set to None runs the introduction instead of
    an extraction.
    """

    def __init__(self, state_machine: InterviewStateMachine, responder: Responder,
                 persona_instruction: str = PERSONA_INSTRUCTION):
        self.state_machine = state_machine
        self.responder = responder
        self.persona_instruction = persona_instruction
        self.workflow = StateGraph(TurnState)
        self._build_graph()

    def _build_graph(self):
        self.workflow.add_node("apply_transition", self.apply_transition)
        self.workflow.add_node("generate_response", self.generate_response)
        self.workflow.add_edge("apply_transition", "generate_response")
        self.workflow.add_edge("generate_response", END)
        self.workflow.set_entry_point("apply_transition")
        self.app = self.workflow.compile()

    async def apply_transition(self, state: TurnState) -> TurnState:
        if state["user_text"] is None:
            transition = self.state_machine.introduction(state["record"])
        else:
            transition = await self.state_machine.step(state["record"], state["user_text"])
        return {**state, "transition": transition}

    async def generate_response(self, state: TurnState) -> TurnState:
        history = state["history"]
        if state["user_text"] is not None:
            history = history + (ConversationTurn(Speaker.USER, state["user_text"]),)
        try:
            response = await self.responder.respond(
                history, state["transition"].directive, self.persona_instruction
            )
        except Exception as e:
            logger.error(f"Responder failed: {str(e)}", exc_info=True)
            response = TECHNICAL_APOLOGY
        return {**state, "final_response": (response or "").strip() or TECHNICAL_APOLOGY}

    async def run(self, record: FinancialRecord, history: Tuple[ConversationTurn, ...],
                  user_text: Optional[str] = None) -> TurnState:
        initial_state = {
            "user_text": user_text,
            "record": record,
            "history": tuple(history),
            "transition": None,
            "final_response": "",
        }
        return await self.app.ainvoke(initial_state)
