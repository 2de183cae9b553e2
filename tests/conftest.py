"""
Shared test fixtures.

Temporary SQLite-backed stores, a small study, a live session built the way
InterviewSessionService builds one, and a collaborator mock whose async
methods can be scripted per test.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from openinterviewer.core.config import LimitsConfig, SynthesisConfig
from openinterviewer.domain.models import (
    CollaboratorSuccess,
    InterviewSession,
    ProfileField,
    StudyConfig,
    SynthesisResult,
)
from openinterviewer.llm.collaborator import InterviewCollaborator
from openinterviewer.persistence.database import init_database
from openinterviewer.persistence.kv_store import KeyValueStore
from openinterviewer.persistence.repositories import (
    InterviewRepository,
    StudyRepository,
)
from openinterviewer.services.phase_engine import PhaseEngine
from openinterviewer.services.profile_extraction import ProfileExtractionModel


def _turn_json(message: str = "Tell me more.", **fields) -> str:
    """Serialize a collaborator turn response the way the model emits it."""
    return json.dumps({"message": message, **fields})


@pytest.fixture
def turn_json():
    return _turn_json


@pytest.fixture
async def test_db(tmp_path):
    """Create and initialize a temporary database."""
    db_path = tmp_path / "test.db"
    await init_database(db_path)
    yield db_path


@pytest.fixture
async def kv_store(test_db):
    return KeyValueStore(test_db)


@pytest.fixture
async def interview_repo(kv_store):
    return InterviewRepository(kv_store)


@pytest.fixture
async def study_repo(kv_store):
    return StudyRepository(kv_store)


@pytest.fixture
def limits():
    return LimitsConfig()


@pytest.fixture
def synthesis_config():
    return SynthesisConfig()


@pytest.fixture
def study_config():
    """Three core questions and two profile fields."""
    return StudyConfig(
        id="study-1",
        name="Remote Work Habits",
        description="How people structure a remote working day",
        research_question="What makes remote work sustainable?",
        core_questions=[
            "How does a typical workday start?",
            "What tools do you rely on?",
            "What would you change?",
        ],
        topic_areas=["daily routine", "tooling"],
        profile_schema=[
            ProfileField(id="role", label="Job role", required=True),
            ProfileField(id="experience", label="Years remote"),
        ],
    )


@pytest.fixture
def live_session(study_config):
    """A started session without its greeting."""
    profile_model = ProfileExtractionModel.initialize(
        study_config.profile_schema, session_id="session-1"
    )
    session = InterviewSession(
        id="session-1",
        study=study_config,
        profile=profile_model.profile,
    )
    PhaseEngine(session.progress, session.behavior, session.id).begin(
        len(study_config.core_questions)
    )
    return session


@pytest.fixture
def mock_collaborator():
    """Collaborator with every operation replaced by an AsyncMock."""
    collaborator = MagicMock(spec=InterviewCollaborator)
    collaborator.generate_turn = AsyncMock(
        return_value=CollaboratorSuccess(_turn_json())
    )
    collaborator.generate_greeting = AsyncMock(
        return_value=CollaboratorSuccess("Hello! Tell me about yourself.")
    )
    collaborator.synthesize_session = AsyncMock(
        return_value=CollaboratorSuccess(
            SynthesisResult(key_insights=["Mornings matter"], bottom_line="Routine wins.")
        )
    )
    collaborator.synthesize_aggregate = AsyncMock()
    collaborator.generate_followup = AsyncMock()
    return collaborator
