from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    DEFAULT_CAPABILITIES,
    DEFAULT_NICKNAME,
    OAUTH_PREFIX,
    TWITCH_IRC_WSS_URL,
)
from ..errors import ConfigurationError


def normalize_oauth_token(token: str | None) -> str:
    """Prefix a bare token with ``oauth:``.

    A token that starts with ``:`` only lacks the scheme word, so ``oauth``
    is prepended. Empty tokens stay empty (anonymous login).
    """
    token = (token or "").strip()
    if not token or token.startswith(OAUTH_PREFIX):
        return token
    if token.startswith(":"):
        return "oauth" + token
    return OAUTH_PREFIX + token


class SessionConfig(BaseModel):
    """Per-connection settings for a chat session.

    Attributes:
        oauth_token: Chat token, normalized to the ``oauth:`` scheme.
        nickname: Login name; validated at connect time.
        capabilities: Capability identifiers requested during the handshake,
            in order and without duplicates.
        url: Chat endpoint.
    """

    model_config = ConfigDict(frozen=True)

    oauth_token: str = ""
    nickname: str = DEFAULT_NICKNAME
    capabilities: tuple[str, ...] = Field(default=DEFAULT_CAPABILITIES)
    url: str = TWITCH_IRC_WSS_URL

    @field_validator("oauth_token", mode="before")
    @classmethod
    def validate_oauth_token(cls, v: Any) -> str:
        if v is not None and not isinstance(v, str):
            raise ValueError("oauth_token must be a string")
        return normalize_oauth_token(v)

    @field_validator("nickname", mode="before")
    @classmethod
    def validate_nickname(cls, v: Any) -> str:
        # Blank nicknames are rejected by ensure_connectable at connect time
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("nickname must be a string")
        return v

    @field_validator("capabilities", mode="before")
    @classmethod
    def validate_capabilities(cls, v: Any) -> tuple[str, ...]:
        if v is None:
            return DEFAULT_CAPABILITIES
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list | tuple):
            raise ValueError("capabilities must be a list")
        cleaned = (str(c).strip() for c in v)
        return tuple(dict.fromkeys(c for c in cleaned if c))

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("ws://", "wss://")):
            raise ValueError("url must be a ws:// or wss:// endpoint")
        return v

    @property
    def login(self) -> str:
        """Nickname as sent in the NICK frame."""
        return self.nickname.strip().lower()

    def ensure_connectable(self) -> None:
        """Raise ``ConfigurationError`` if a session cannot be opened with this config."""
        if not self.nickname or not self.nickname.strip():
            raise ConfigurationError(
                "Nickname cannot be empty or whitespace.", data={"nickname": self.nickname}
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionConfig:
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    def __repr__(self) -> str:
        # Keep tokens out of logs
        token = "***" if self.oauth_token else ""
        return (
            f"SessionConfig(nickname={self.nickname!r}, oauth_token={token!r}, "
            f"capabilities={self.capabilities!r}, url={self.url!r})"
        )
