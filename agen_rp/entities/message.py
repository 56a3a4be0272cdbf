from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from agen_rp.entities.attachment import InlineAttachment


class Role(str, Enum):
    """Author of a conversational turn."""

    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """
    One conversational turn.

    SYSTEM messages are session-local annotations and are never sent to the
    model. ``attachment`` holds an optional decoded image.
    """

    role: Role
    content: str
    attachment: InlineAttachment | None = None
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_utcnow)
