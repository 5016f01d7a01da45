# core/settings.py
import os
from dotenv import load_dotenv
from pathlib import Path
from langchain_openai import ChatOpenAI

# Load .env from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes")


class Settings:
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    DEFAULT_MODEL = os.getenv("ADVISOR_MODEL", "gpt-4o-mini")
    RESPONDER_TEMPERATURE = float(os.getenv("RESPONDER_TEMPERATURE", "0.7"))
    EXTRACTOR_TEMPERATURE = float(os.getenv("EXTRACTOR_TEMPERATURE", "0"))  # Deterministic for financial data
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))
    LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "0"))
    REASK_MISSING_EXPENSE = _env_bool("REASK_MISSING_EXPENSE")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.getenv("LOG_FILE", "financial_advisor.log")


settings = Settings()


def get_model(temperature: float, model_name: str = None, config: Settings = None) -> ChatOpenAI:
    config = config or settings
    if not config.OPENAI_API_KEY:
        raise ValueError("OPENAI_API_KEY not found in .env file")
    return ChatOpenAI(
        model=model_name or config.DEFAULT_MODEL,
        api_key=config.OPENAI_API_KEY,
        temperature=temperature,
        timeout=config.LLM_TIMEOUT,
        max_retries=config.LLM_MAX_RETRIES,
    )
