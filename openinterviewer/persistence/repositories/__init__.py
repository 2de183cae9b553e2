"""Repository layer over the key-value store."""

from .interview_repo import InterviewRepository
from .study_repo import StudyRepository

__all__ = ["InterviewRepository", "StudyRepository"]
