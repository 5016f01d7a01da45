import logging
from typing import List, Protocol, Sequence
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from core.prompts import EMPTY_REPLY_APOLOGY, TECHNICAL_APOLOGY
from models.data_models import ConversationTurn, Speaker

logger = logging.getLogger(__name__)


class Responder(Protocol):
    async def respond(
        self, history: Sequence[ConversationTurn], directive: str, persona_instruction: str
    ) -> str:
        ...


def to_chat_messages(
    history: Sequence[ConversationTurn], directive: str, persona_instruction: str
) -> List[BaseMessage]:
    """Map neutral speaker tags onto chat-model roles; the directive goes last as a user message."""
    messages: List[BaseMessage] = [SystemMessage(content=persona_instruction)]
    for turn in history:
        if turn.speaker is Speaker.USER:
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    messages.append(HumanMessage(content=directive))
    return messages


class LLMResponder:
    def __init__(self, llm):
        self.llm = llm

    async def respond(self, history, directive, persona_instruction):
        try:
            response = await self.llm.ainvoke(to_chat_messages(history, directive, persona_instruction))
        except Exception as e:
            logger.error(f"Error generating advisor reply: {str(e)}", exc_info=True)
            return TECHNICAL_APOLOGY
        return _content_text(response.content).strip() or EMPTY_REPLY_APOLOGY


def _content_text(content) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
