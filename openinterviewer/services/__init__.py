# noqa
from openinterviewer.services.study_service import StudyService
from openinterviewer.services.session_service import InterviewSessionService
from openinterviewer.services.record_service import SessionRecordService
from openinterviewer.services.aggregate_synthesizer import AggregateSynthesizer
from openinterviewer.services.followup_generator import FollowupGenerator

__all__ = [
    "StudyService",
    "InterviewSessionService",
    "SessionRecordService",
    "AggregateSynthesizer",
    "FollowupGenerator",
]
