"""Study configuration models.

A study is authored by a researcher and is immutable for the duration of any
interview session that uses it.

Core Models:
    - ProfileField: One structured field to extract from participants
    - StudyConfig: Questions, topics, profile schema and AI behavior for a study
    - StoredStudy: A saved StudyConfig plus storage metadata

Lineage:
    Follow-up studies carry parent_study_id, parent_study_name and
    generated_from="synthesis" so tooling can render provenance.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from openinterviewer.domain.models.base import CamelModel, now_ms


class AIBehavior(str, Enum):
    """How tightly the interviewer sticks to the core questions."""

    STRUCTURED = "structured"
    STANDARD = "standard"
    EXPLORATORY = "exploratory"


class AIProvider(str, Enum):
    """Supported AI text generation providers."""

    GEMINI = "gemini"
    CLAUDE = "claude"


class ProfileField(CamelModel):
    """Schema entry for one participant profile field.

    The options list is advisory: it is shown to the collaborator but values
    outside it are still accepted.
    """

    id: str = Field(min_length=1, description="Field identifier, unique per study")
    label: str = Field(description="Human-readable field label")
    extraction_hint: str = Field(
        default="", description="Guidance for the interviewer on what to listen for"
    )
    required: bool = Field(default=False, description="Reported, never enforced")
    options: Optional[List[str]] = Field(
        default=None, description="Advisory allowed values"
    )


class VoiceConfig(CamelModel):
    """Voice settings carried through for the client; not used server-side."""

    enabled: bool = False
    voice_name: Optional[str] = None


class StudyConfig(CamelModel):
    """Researcher-authored study definition.

    Invariants:
        - Profile field ids are unique within a study
        - A study is usable only with at least one core question
    """

    id: Optional[str] = Field(default=None, description="Assigned when saved")
    name: str = Field(min_length=1, description="Study name")
    description: str = Field(default="")
    research_question: str = Field(default="")
    core_questions: List[str] = Field(default_factory=list)
    topic_areas: List[str] = Field(default_factory=list)
    profile_schema: List[ProfileField] = Field(default_factory=list)
    ai_behavior: AIBehavior = AIBehavior.STANDARD
    ai_provider: Optional[AIProvider] = None
    ai_model: Optional[str] = None
    voice_config: Optional[VoiceConfig] = None
    consent_text: str = Field(default="")
    created_at: int = Field(default_factory=now_ms)

    # Lineage
    parent_study_id: Optional[str] = None
    parent_study_name: Optional[str] = None
    generated_from: Optional[str] = Field(
        default=None, pattern="^(synthesis|manual)$"
    )

    @field_validator("profile_schema")
    @classmethod
    def unique_field_ids(cls, v: List[ProfileField]) -> List[ProfileField]:
        seen = set()
        for profile_field in v:
            if profile_field.id in seen:
                raise ValueError(f"Duplicate profile field id: {profile_field.id}")
            seen.add(profile_field.id)
        return v

    @property
    def is_usable(self) -> bool:
        """True when the study has at least one core question."""
        return len(self.core_questions) > 0


class StoredStudy(CamelModel):
    """A saved study with advisory interview counter and edit lock."""

    id: str
    config: StudyConfig
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    interview_count: int = Field(default=0, ge=0)
    is_locked: bool = False
