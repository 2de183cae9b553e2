"""Transcript message and context entry models."""

import uuid
from enum import Enum
from typing import Optional

from pydantic import Field

from openinterviewer.domain.models.base import CamelModel, now_ms


class MessageRole(str, Enum):
    """Speaker of a transcript message. USER is the participant."""

    USER = "user"
    AI = "ai"
    SYSTEM = "system"


class ContextSource(str, Enum):
    VOICE = "voice"
    TEXT = "text"
    SYSTEM = "system"


class InterviewMessage(CamelModel):
    """One append-only transcript entry."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: MessageRole
    content: str
    timestamp: int = Field(default_factory=now_ms)
    is_voice: Optional[bool] = None


class ContextEntry(CamelModel):
    """Free-text context captured during the session (typed or spoken)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    source: ContextSource = ContextSource.TEXT
    timestamp: int = Field(default_factory=now_ms)
