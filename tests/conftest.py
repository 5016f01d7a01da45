"""
Pytest configuration and fixtures
"""
from collections import defaultdict, deque
from datetime import date

import pytest

from core.assistant import FinancialAdvisorSession
from core.settings import Settings
from workflow.state_machine import InterviewStateMachine

TODAY = date(2026, 1, 15)


class ScriptedExtractor:
    """Returns queued results per shape; an empty queue means nothing was found."""

    def __init__(self):
        self.queues = defaultdict(deque)
        self.calls = []

    def queue(self, shape, *results):
        self.queues[shape].extend(results)
        return self

    async def extract(self, text, shape, context=None):
        self.calls.append((text, shape, context))
        queue = self.queues[shape]
        return queue.popleft() if queue else None


class RecordingResponder:
    def __init__(self, reply="Entendido.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def respond(self, history, directive, persona_instruction):
        self.calls.append((tuple(history), directive, persona_instruction))
        if self.error is not None:
            raise self.error
        return self.reply


class OfflineSettings(Settings):
    OPENAI_API_KEY = None
    REASK_MISSING_EXPENSE = False


@pytest.fixture
def extractor():
    return ScriptedExtractor()


@pytest.fixture
def responder():
    return RecordingResponder()


@pytest.fixture
def machine(extractor):
    return InterviewStateMachine(extractor, clock=lambda: TODAY)


@pytest.fixture
def session(extractor, responder):
    return FinancialAdvisorSession(
        extractor=extractor, responder=responder, settings=OfflineSettings(), clock=lambda: TODAY
    )
