from __future__ import annotations

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from ..observability.logging_utils import log_warning
from .config import AppConfig, get_config
from .llm import get_chat_model


def llm_structured_extract(
    prompt: str,
    *,
    schema: Type[BaseModel],
    system_prompt: str,
    cfg: Optional[AppConfig] = None,
) -> Dict[str, Any]:
    """
    Ask the chat model for an object matching ``schema``.

    Returns an empty dict when the provider is ``mock`` or the call fails;
    callers treat every field as optional.
    """
    if not prompt:
        return {}
    cfg = cfg or get_config()
    if cfg.llm_provider == "mock":
        return {}
    try:
        llm = get_chat_model(cfg)
    except ValueError as exc:
        log_warning("llm_unavailable", error=str(exc))
        return {}
    try:
        extractor = llm.with_structured_output(schema)
        result = extractor.invoke(
            [
                ("system", system_prompt),
                ("human", prompt),
            ]
        )
        payload = result.model_dump(exclude_none=True)
        return payload if isinstance(payload, dict) else {}
    except Exception as exc:
        log_warning("llm_structured_extract_failed", schema=schema.__name__, error=str(exc))
        return {}
