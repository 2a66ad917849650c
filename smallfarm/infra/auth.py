"""Bearer-token session verification delegated to an external auth service."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from ..observability.logging_utils import log_warning
from ..schemas import SessionUser
from .config import AppConfig, get_config


class SessionVerifier:
    def verify(self, token: str) -> Optional[SessionUser]:
        raise NotImplementedError


def parse_static_tokens(raw: Optional[str]) -> Dict[str, str]:
    """Parse ``token=user_id,token2=user_id2`` into a mapping."""
    if not raw:
        return {}
    tokens: Dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item or "=" not in item:
            continue
        token, user_id = item.split("=", 1)
        token = token.strip()
        user_id = user_id.strip()
        if token and user_id:
            tokens[token] = user_id
    return tokens


class StaticTokenVerifier(SessionVerifier):
    def __init__(self, tokens: Dict[str, str]) -> None:
        self._tokens = dict(tokens)

    def verify(self, token: str) -> Optional[SessionUser]:
        user_id = self._tokens.get(token)
        if not user_id:
            return None
        return SessionUser(user_id=user_id)


class HttpSessionVerifier(SessionVerifier):
    """
    Ask the auth service who owns a token.

    The service is called with the bearer token and is expected to answer
    ``{"user": {"id": ..., "email": ...}}`` for a live session. Any non-2xx
    answer, or a payload without a user id, counts as no session.
    """

    def __init__(
        self,
        session_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._session_url = session_url
        self._timeout = timeout
        self._transport = transport

    def verify(self, token: str) -> Optional[SessionUser]:
        try:
            with httpx.Client(
                timeout=self._timeout, trust_env=False, transport=self._transport
            ) as client:
                response = client.get(
                    self._session_url,
                    headers={
                        "Accept": "application/json",
                        "Authorization": f"Bearer {token}",
                    },
                )
        except httpx.HTTPError as exc:
            log_warning("auth_session_lookup_failed", error=str(exc))
            return None
        if response.status_code in (401, 403, 404):
            return None
        if response.is_error:
            log_warning("auth_session_lookup_failed", status=response.status_code)
            return None
        try:
            payload = response.json()
        except ValueError:
            return None
        user = payload.get("user") if isinstance(payload, dict) else None
        if not isinstance(user, dict) or not user.get("id"):
            return None
        return SessionUser(user_id=str(user["id"]), email=user.get("email"))


def build_session_verifier(cfg: Optional[AppConfig] = None) -> SessionVerifier:
    cfg = cfg or get_config()
    provider = (cfg.auth_provider or "static").lower()
    if provider == "http":
        if not cfg.auth_session_url:
            raise ValueError("AUTH_SESSION_URL is required when AUTH_PROVIDER=http")
        return HttpSessionVerifier(cfg.auth_session_url, timeout=cfg.auth_timeout_seconds)
    if provider == "static":
        return StaticTokenVerifier(parse_static_tokens(cfg.auth_static_tokens))
    raise ValueError(f"unsupported auth provider: {provider}")


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
