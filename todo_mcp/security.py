from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AuthConfig:
    mode: str = "none"


@dataclass(frozen=True)
class AuthContext:
    """Per-request caller identity. Tools receive it but do not consult it yet."""

    user_id: Optional[str] = None


def load_auth_config(config: Dict[str, Any]) -> AuthConfig:
    security_cfg = config.get("security", {}) or {}
    auth_cfg = security_cfg.get("auth", {}) or {}
    return AuthConfig(mode=str(auth_cfg.get("mode", "none")))


class AuthBackend:
    def __init__(self, auth_config: AuthConfig) -> None:
        self._config = auth_config

    def authenticate(self, meta: Optional[Dict[str, Any]] = None) -> AuthContext:
        meta = meta or {}
        user_id = meta.get("user_id")
        return AuthContext(user_id=str(user_id) if user_id is not None else None)


def build_auth_backend(config: Dict[str, Any]) -> AuthBackend:
    auth_config = load_auth_config(config)
    return AuthBackend(auth_config)
