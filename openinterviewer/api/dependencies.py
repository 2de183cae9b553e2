"""Dependency injection for API routes."""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header

from openinterviewer.core.config import settings
from openinterviewer.domain.models.access import AccessGrant
from openinterviewer.llm.collaborator import InterviewCollaborator
from openinterviewer.persistence.kv_store import KeyValueStore
from openinterviewer.persistence.repositories import (
    InterviewRepository,
    StudyRepository,
)
from openinterviewer.services.aggregate_synthesizer import AggregateSynthesizer
from openinterviewer.services.followup_generator import FollowupGenerator
from openinterviewer.services.record_service import SessionRecordService
from openinterviewer.services.session_registry import SessionRegistry
from openinterviewer.services.session_service import InterviewSessionService
from openinterviewer.services.study_service import StudyService

TRUE_VALUES = {"1", "true", "yes"}


@lru_cache(maxsize=1)
def get_kv_store() -> KeyValueStore:
    """Shared key-value store over the configured SQLite file."""
    return KeyValueStore(settings.database_path)


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    """Process-wide registry of live sessions.

    Live sessions exist only in memory, so every request must see the same
    registry instance.
    """
    return SessionRegistry()


@lru_cache(maxsize=1)
def get_collaborator() -> InterviewCollaborator:
    """Cached collaborator; LLM clients are resolved per study on each call."""
    return InterviewCollaborator()


KVStoreDep = Annotated[KeyValueStore, Depends(get_kv_store)]
RegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
CollaboratorDep = Annotated[InterviewCollaborator, Depends(get_collaborator)]


def get_access_grant(
    x_study_id: Annotated[Optional[str], Header()] = None,
    x_researcher: Annotated[Optional[str], Header()] = None,
) -> AccessGrant:
    """Build the caller's grant from headers set by the upstream gate."""
    return AccessGrant(
        study_id=x_study_id or None,
        is_researcher=(x_researcher or "").strip().lower() in TRUE_VALUES,
    )


def get_researcher_grant(
    grant: Annotated[AccessGrant, Depends(get_access_grant)],
) -> AccessGrant:
    grant.require_researcher()
    return grant


GrantDep = Annotated[AccessGrant, Depends(get_access_grant)]
ResearcherDep = Annotated[AccessGrant, Depends(get_researcher_grant)]


def get_interview_repository(store: KVStoreDep) -> InterviewRepository:
    return InterviewRepository(store)


def get_study_repository(store: KVStoreDep) -> StudyRepository:
    return StudyRepository(store)


InterviewRepoDep = Annotated[InterviewRepository, Depends(get_interview_repository)]
StudyRepoDep = Annotated[StudyRepository, Depends(get_study_repository)]


def get_study_service(
    studies: StudyRepoDep, interviews: InterviewRepoDep
) -> StudyService:
    return StudyService(studies, interviews)


def get_record_service(
    store: KVStoreDep, interviews: InterviewRepoDep, studies: StudyRepoDep
) -> SessionRecordService:
    return SessionRecordService(store, interviews=interviews, studies=studies)


def get_session_service(
    registry: RegistryDep,
    collaborator: CollaboratorDep,
    record_service: Annotated[SessionRecordService, Depends(get_record_service)],
) -> InterviewSessionService:
    """FastAPI dependency injection for InterviewSessionService.

    Built per request around the shared registry and collaborator.
    """
    return InterviewSessionService(registry, collaborator, record_service)


def get_aggregate_synthesizer(
    interviews: InterviewRepoDep, collaborator: CollaboratorDep
) -> AggregateSynthesizer:
    return AggregateSynthesizer(interviews, collaborator)


def get_followup_generator(collaborator: CollaboratorDep) -> FollowupGenerator:
    return FollowupGenerator(collaborator)


StudyServiceDep = Annotated[StudyService, Depends(get_study_service)]
RecordServiceDep = Annotated[SessionRecordService, Depends(get_record_service)]
SessionServiceDep = Annotated[InterviewSessionService, Depends(get_session_service)]
AggregateDep = Annotated[AggregateSynthesizer, Depends(get_aggregate_synthesizer)]
FollowupDep = Annotated[FollowupGenerator, Depends(get_followup_generator)]
