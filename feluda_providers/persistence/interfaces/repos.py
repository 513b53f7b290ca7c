"""Repository & Unit of Work protocols for the service layer.

Controllers depend only on these abstractions; the concrete implementation
lives under ``persistence/sqlite/``. Transaction control belongs to the
``IUnitOfWork``; repositories never commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

# ---------- Data Transfer Objects ----------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Exchange:
    """One prompt/response pair stored for a conversation session.

    Attributes
    ----------
    session_id: Client-chosen conversation identifier.
    prompt: Prompt as sent by the user (before context was prepended).
    response: Generated text.
    model: Model id the client selected.
    created_at: UTC timestamp.
    id: Primary key once stored.
    """

    session_id: str
    prompt: str
    response: str
    model: str
    created_at: datetime = field(default_factory=_utcnow)
    id: Optional[int] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "prompt": self.prompt,
            "response": self.response,
            "model": self.model,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class StoredSettings:
    """Singleton settings document."""

    values: Dict[str, Any]
    updated_at: datetime


# ---------- Repository Protocols ----------


class IConversationRepo(Protocol):
    def add(self, exchange: Exchange) -> int: ...

    def list_for_session(self, session_id: str, limit: Optional[int] = None) -> List[Exchange]:
        """Exchanges of a session, oldest first; ``limit`` keeps the newest N."""
        ...


class ISettingsRepo(Protocol):
    def get_settings(self) -> StoredSettings: ...

    def set_settings(self, values: Dict[str, Any]) -> StoredSettings: ...


class IUnitOfWork(Protocol):
    conversations: IConversationRepo
    settings: ISettingsRepo

    def __enter__(self) -> "IUnitOfWork": ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


__all__ = [
    "Exchange",
    "StoredSettings",
    "IConversationRepo",
    "ISettingsRepo",
    "IUnitOfWork",
]
