from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from .config import AppConfig, get_config


def get_chat_model(cfg: Optional[AppConfig] = None) -> BaseChatModel:
    cfg = cfg or get_config()
    if cfg.llm_provider != "openai":
        raise ValueError(
            f"LLM provider {cfg.llm_provider!r} cannot serve chat models, set LLM_PROVIDER=openai"
        )
    if not cfg.openai_api_key:
        raise ValueError("OPENAI_API_KEY is not configured")
    kwargs = {
        "api_key": cfg.openai_api_key,
        "temperature": cfg.llm_temperature,
        "model": cfg.llm_model,
    }
    if cfg.openai_api_base:
        kwargs["base_url"] = cfg.openai_api_base
    return ChatOpenAI(**kwargs)
