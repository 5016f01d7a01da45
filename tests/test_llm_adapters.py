"""
Tests for the chat-model backed extractor and responder
"""
import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from core import prompts
from models.data_models import ConversationTurn, Speaker
from models.extraction import ExpenseAmountExtraction, IncomeExtraction, SavingsGoalExtraction
from tools.extractor import LLMExtractor
from tools.responder import LLMResponder, to_chat_messages


class FakeStructuredRunnable:
    def __init__(self, result):
        self.result = result
        self.messages = None

    async def ainvoke(self, messages):
        self.messages = messages
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeStructuredModel:
    def __init__(self, result):
        self.runnable = FakeStructuredRunnable(result)
        self.shapes = []

    def with_structured_output(self, shape):
        self.shapes.append(shape)
        return self.runnable


class FakeChatModel:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.messages = None

    async def ainvoke(self, messages):
        self.messages = messages
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.mark.asyncio
async def test_extractor_returns_typed_value():
    llm = FakeStructuredModel(IncomeExtraction(income=3200))
    extractor = LLMExtractor(llm)

    result = await extractor.extract("mi sueldo es 3200", IncomeExtraction)

    assert result == IncomeExtraction(income=3200)
    assert llm.shapes == [IncomeExtraction]
    system, human = llm.runnable.messages
    assert isinstance(system, SystemMessage)
    assert '"mi sueldo es 3200"' in human.content


@pytest.mark.asyncio
async def test_extractor_reuses_structured_runnable():
    llm = FakeStructuredModel(IncomeExtraction(income=1))
    extractor = LLMExtractor(llm)
    await extractor.extract("1", IncomeExtraction)
    await extractor.extract("1", IncomeExtraction)
    assert llm.shapes == [IncomeExtraction]


@pytest.mark.asyncio
async def test_extractor_renders_context():
    llm = FakeStructuredModel(ExpenseAmountExtraction(amount=800))
    extractor = LLMExtractor(llm)

    await extractor.extract("unos 800", ExpenseAmountExtraction, {"category": "Alquiler"})

    assert 'category "Alquiler"' in llm.runnable.messages[1].content


@pytest.mark.asyncio
async def test_extractor_validates_dict_output():
    llm = FakeStructuredModel({"name": "Viaje", "target_amount": 900, "target_date": "2026-06-01"})
    result = await LLMExtractor(llm).extract("viaje", SavingsGoalExtraction, {"today": "2026-01-15"})
    assert result == SavingsGoalExtraction(name="Viaje", target_amount=900, target_date="2026-06-01")


@pytest.mark.asyncio
@pytest.mark.parametrize("output", [None, RuntimeError("rate limited"), {"income": "mucho"}, "3000"])
async def test_extractor_maps_failures_to_none(output):
    result = await LLMExtractor(FakeStructuredModel(output)).extract("texto", IncomeExtraction)
    assert result is None


def test_chat_messages_translate_speakers():
    history = [
        ConversationTurn(Speaker.ADVISOR, "¿Cuál es su ingreso?"),
        ConversationTurn(Speaker.USER, "3000"),
    ]

    messages = to_chat_messages(history, "Pregunte por las categorías.", "persona")

    assert [type(m) for m in messages] == [SystemMessage, AIMessage, HumanMessage, HumanMessage]
    assert messages[0].content == "persona"
    assert messages[-1].content == "Pregunte por las categorías."


@pytest.mark.asyncio
async def test_responder_returns_model_text():
    llm = FakeChatModel(reply=AIMessage(content="  Estimado cliente, ¿cuáles son sus gastos?  "))
    reply = await LLMResponder(llm).respond([], "directiva", prompts.PERSONA_INSTRUCTION)
    assert reply == "Estimado cliente, ¿cuáles son sus gastos?"


@pytest.mark.asyncio
async def test_responder_joins_content_blocks():
    llm = FakeChatModel(reply=AIMessage(content=[{"type": "text", "text": "Buenos "}, "días"]))
    assert await LLMResponder(llm).respond([], "directiva", "persona") == "Buenos días"


@pytest.mark.asyncio
async def test_responder_empty_reply_gets_apology():
    llm = FakeChatModel(reply=AIMessage(content=""))
    assert await LLMResponder(llm).respond([], "directiva", "persona") == prompts.EMPTY_REPLY_APOLOGY


@pytest.mark.asyncio
async def test_responder_error_gets_apology():
    llm = FakeChatModel(error=ConnectionError("network down"))
    assert await LLMResponder(llm).respond([], "directiva", "persona") == prompts.TECHNICAL_APOLOGY
