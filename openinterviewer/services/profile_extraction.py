"""
Profile extraction model.

Holds per-field extraction status for one participant and applies the
collaborator's declared updates. Collaborator output is untrusted, so
unknown field ids are dropped rather than raised. Allowed-value lists on
the schema are advisory and not enforced here.
"""

import uuid
from typing import List, Optional

import structlog

from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.profile import (
    FieldStatus,
    ParticipantProfile,
    ProfileFieldValue,
)
from openinterviewer.domain.models.study import ProfileField

log = structlog.get_logger(__name__)


class ProfileExtractionModel:
    """Applies field updates to a ParticipantProfile."""

    def __init__(self, profile: ParticipantProfile, session_id: Optional[str] = None):
        self.profile = profile
        self.session_id = session_id

    @classmethod
    def initialize(
        cls, schema: List[ProfileField], session_id: Optional[str] = None
    ) -> "ProfileExtractionModel":
        """Create a fresh profile with one pending entry per schema field."""
        profile = ParticipantProfile(
            id=str(uuid.uuid4()),
            fields=[ProfileFieldValue(field_id=f.id) for f in schema],
            timestamp=now_ms(),
        )
        return cls(profile, session_id=session_id)

    def apply_update(
        self, field_id: str, value: Optional[str], status: FieldStatus
    ) -> bool:
        """
        Overwrite one field's value and status (last write wins).

        Returns:
            True if applied, False if the field id is not in the profile
        """
        entry = self.profile.get_field(field_id)
        if entry is None:
            log.warning(
                "profile_update_unknown_field",
                session_id=self.session_id,
                field_id=field_id,
            )
            return False

        entry.value = value
        entry.status = status
        entry.extracted_at = now_ms()

        log.debug(
            "profile_field_updated",
            session_id=self.session_id,
            field_id=field_id,
            status=status.value,
        )
        return True

    def append_raw_context(self, text: str) -> None:
        """Append narrative text, newline-separated from what is already there."""
        if not text:
            return
        if self.profile.raw_context:
            self.profile.raw_context = f"{self.profile.raw_context}\n{text}"
        else:
            self.profile.raw_context = text

    def missing_required_fields(self, schema: List[ProfileField]) -> List[str]:
        """Ids of required fields still pending. Reporting only."""
        missing = []
        for schema_field in schema:
            if not schema_field.required:
                continue
            entry = self.profile.get_field(schema_field.id)
            if entry is None or entry.status == FieldStatus.PENDING:
                missing.append(schema_field.id)
        return missing
