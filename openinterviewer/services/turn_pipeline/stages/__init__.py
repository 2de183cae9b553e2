"""
Pipeline stages for turn processing.

Each stage encapsulates one logical step of a turn, from appending the
participant message through conclusion. Stages execute sequentially in the
TurnPipeline orchestrator.
"""

from .participant_message_stage import ParticipantMessageStage
from .collaborator_stage import CollaboratorStage
from .response_parsing_stage import ResponseParsingStage
from .profile_update_stage import ProfileUpdateStage
from .phase_transition_stage import PhaseTransitionStage
from .question_progress_stage import QuestionProgressStage
from .response_saving_stage import ResponseSavingStage
from .conclusion_stage import ConclusionStage

__all__ = [
    "ParticipantMessageStage",
    "CollaboratorStage",
    "ResponseParsingStage",
    "ProfileUpdateStage",
    "PhaseTransitionStage",
    "QuestionProgressStage",
    "ResponseSavingStage",
    "ConclusionStage",
]
