import logging
from datetime import datetime
from typing import Any, Dict, Iterator, Tuple
from models.data_models import ConversationTurn, Speaker

logger = logging.getLogger(__name__)


class ConversationLog:
    """Append-only record of the chat, oldest turn first."""

    def __init__(self):
        self._turns = []

    def add_turn(self, speaker: Speaker, text: str, timestamp: datetime = None) -> ConversationTurn:
        turn = ConversationTurn(speaker=speaker, text=text, timestamp=timestamp or datetime.now())
        self._turns.append(turn)
        logger.debug(f"Logged {speaker.value} turn: {len(text)} chars")
        return turn

    def add_interaction(self, user_message: str, advisor_response: str) -> Tuple[ConversationTurn, ConversationTurn]:
        return self.add_turn(Speaker.USER, user_message), self.add_turn(Speaker.ADVISOR, advisor_response)

    @property
    def turns(self) -> Tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(self.turns)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "total_turns": len(self._turns),
            "user_turns": sum(1 for turn in self._turns if turn.speaker is Speaker.USER),
            "advisor_turns": sum(1 for turn in self._turns if turn.speaker is Speaker.ADVISOR),
            "started_at": self._turns[0].timestamp if self._turns else None,
        }
