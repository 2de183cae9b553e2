"""
Custom exception hierarchy for the interview platform.

All application exceptions inherit from InterviewSystemError.
"""


class InterviewSystemError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(InterviewSystemError):
    """Invalid or missing configuration."""

    pass


# =============================================================================
# LLM Errors
# =============================================================================


class LLMError(InterviewSystemError):
    """Base for LLM-related errors."""

    pass


class LLMTimeoutError(LLMError):
    """LLM call timed out."""

    pass


class LLMRateLimitError(LLMError):
    """LLM rate limit exceeded."""

    pass


class LLMResponseParseError(LLMError):
    """Failed to parse LLM response."""

    pass


# =============================================================================
# Session Errors
# =============================================================================


class SessionError(InterviewSystemError):
    """Session-related error."""

    pass


class SessionNotFoundError(SessionError):
    """Session does not exist."""

    pass


class SessionCompletedError(SessionError):
    """Attempted operation on completed session."""

    pass


# =============================================================================
# Caller Errors
# =============================================================================


class ValidationError(InterviewSystemError):
    """Input validation failed."""

    pass


class AccessDeniedError(InterviewSystemError):
    """Access grant does not cover the requested study."""

    pass


class PreconditionError(InterviewSystemError):
    """Operation is not available for the current data."""

    pass


class InsufficientDataError(PreconditionError):
    """Not enough completed interviews for the requested operation."""

    def __init__(self, message: str, minimum: int):
        self.minimum = minimum
        super().__init__(message)


# =============================================================================
# Study Errors
# =============================================================================


class StudyError(InterviewSystemError):
    """Study-related error."""

    pass


class StudyNotFoundError(StudyError):
    """Study does not exist."""

    pass


class StudyLockedError(StudyError):
    """Study has interviews and the edit was not confirmed."""

    def __init__(self, message: str, interview_count: int):
        self.interview_count = interview_count
        super().__init__(message)


class StudyHasInterviewsError(StudyError):
    """Study cannot be deleted while interviews exist."""

    pass


# =============================================================================
# Interview Record Errors
# =============================================================================


class InterviewNotFoundError(InterviewSystemError):
    """Persisted interview record does not exist."""

    pass


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(InterviewSystemError):
    """Key-value store operation failed."""

    pass


class StorageUnavailableError(StorageError):
    """Key-value store is not reachable."""

    pass
