"""Synthesis result models.

Core Models:
    - SynthesisResult: Analysis of one completed interview
    - AggregateSynthesisResult: Cross-interview analysis for a study
    - FollowupSuggestion: Collaborator proposal for a follow-up study

Fallbacks:
    Both synthesis kinds have a fixed placeholder used whenever the analysis
    collaborator fails, so callers can always render something.
"""

from typing import List

from pydantic import Field, field_validator

from openinterviewer.domain.models.base import CamelModel, now_ms


class Theme(CamelModel):
    theme: str
    evidence: str = ""
    frequency: int = Field(default=1, ge=0)


class SynthesisResult(CamelModel):
    """Per-session findings; immutable once attached to a session."""

    stated_preferences: List[str] = Field(default_factory=list)
    revealed_preferences: List[str] = Field(default_factory=list)
    themes: List[Theme] = Field(default_factory=list)
    contradictions: List[str] = Field(default_factory=list)
    key_insights: List[str] = Field(default_factory=list)
    bottom_line: str = ""

    @field_validator(
        "stated_preferences",
        "revealed_preferences",
        "themes",
        "contradictions",
        "key_insights",
        mode="before",
    )
    @classmethod
    def none_to_list(cls, v):
        return [] if v is None else v

    @field_validator("bottom_line", mode="before")
    @classmethod
    def none_to_str(cls, v):
        return "" if v is None else v

    @classmethod
    def placeholder(cls) -> "SynthesisResult":
        return cls(
            key_insights=["Analysis pending..."],
            bottom_line="Interview synthesis in progress.",
        )


class CommonTheme(CamelModel):
    theme: str
    frequency: int = Field(default=1, ge=0)
    representative_quotes: List[str] = Field(default_factory=list)


class DivergentView(CamelModel):
    topic: str
    view_a: str = ""
    view_b: str = ""


class AggregateBody(CamelModel):
    """Collaborator-produced part of an aggregate synthesis.

    Null lists and a null bottom line are normalized to empty values.
    """

    common_themes: List[CommonTheme] = Field(default_factory=list)
    divergent_views: List[DivergentView] = Field(default_factory=list)
    key_findings: List[str] = Field(default_factory=list)
    research_implications: List[str] = Field(default_factory=list)
    bottom_line: str = ""

    @field_validator(
        "common_themes",
        "divergent_views",
        "key_findings",
        "research_implications",
        mode="before",
    )
    @classmethod
    def none_to_list(cls, v):
        return [] if v is None else v

    @field_validator("bottom_line", mode="before")
    @classmethod
    def none_to_str(cls, v):
        return "" if v is None else v

    @classmethod
    def placeholder(cls) -> "AggregateBody":
        return cls(
            key_findings=["Analysis pending..."],
            bottom_line="Aggregate synthesis in progress.",
        )


class AggregateSynthesisResult(AggregateBody):
    """Aggregate body stamped with study, count and generation time.

    Computed on demand and not persisted.
    """

    study_id: str
    interview_count: int = Field(ge=0)
    generated_at: int = Field(default_factory=now_ms)


class FollowupSuggestion(CamelModel):
    """Collaborator proposal for a follow-up study. Empty strings mean absent."""

    name: str = ""
    research_question: str = ""
    core_questions: List[str] = Field(default_factory=list)

    @field_validator("name", "research_question", mode="before")
    @classmethod
    def none_to_str(cls, v):
        return "" if v is None else v

    @field_validator("core_questions", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return [] if v is None else v
