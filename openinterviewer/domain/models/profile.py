"""Participant profile models."""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from openinterviewer.domain.models.base import CamelModel, now_ms


class FieldStatus(str, Enum):
    """Extraction status of a single profile field."""

    PENDING = "pending"
    EXTRACTED = "extracted"
    VAGUE = "vague"
    REFUSED = "refused"


# Statuses the collaborator may declare; "pending" is initial-only.
UPDATE_STATUSES = frozenset(
    {FieldStatus.EXTRACTED, FieldStatus.VAGUE, FieldStatus.REFUSED}
)


class ProfileFieldValue(CamelModel):
    """Current value and status of one profile field."""

    field_id: str
    value: Optional[str] = None
    status: FieldStatus = FieldStatus.PENDING
    extracted_at: Optional[int] = None


class ParticipantProfile(CamelModel):
    """Ordered field values (one per schema field) plus background narrative."""

    id: str
    fields: List[ProfileFieldValue] = Field(default_factory=list)
    raw_context: str = ""
    timestamp: int = Field(default_factory=now_ms)

    def get_field(self, field_id: str) -> Optional[ProfileFieldValue]:
        for value in self.fields:
            if value.field_id == field_id:
                return value
        return None
