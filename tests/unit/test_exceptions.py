"""Tests for exception hierarchy."""

import pytest


def test_exception_hierarchy():
    """All exceptions inherit from InterviewSystemError."""
    from openinterviewer.core.exceptions import (
        AccessDeniedError,
        ConfigurationError,
        InsufficientDataError,
        InterviewNotFoundError,
        InterviewSystemError,
        LLMError,
        LLMRateLimitError,
        LLMResponseParseError,
        LLMTimeoutError,
        PreconditionError,
        SessionCompletedError,
        SessionError,
        SessionNotFoundError,
        StorageError,
        StorageUnavailableError,
        StudyError,
        StudyHasInterviewsError,
        StudyLockedError,
        StudyNotFoundError,
        ValidationError,
    )

    assert issubclass(ConfigurationError, InterviewSystemError)
    assert issubclass(LLMTimeoutError, LLMError)
    assert issubclass(LLMRateLimitError, LLMError)
    assert issubclass(LLMResponseParseError, LLMError)
    assert issubclass(SessionNotFoundError, SessionError)
    assert issubclass(SessionCompletedError, SessionError)
    assert issubclass(ValidationError, InterviewSystemError)
    assert issubclass(AccessDeniedError, InterviewSystemError)
    assert issubclass(InsufficientDataError, PreconditionError)
    assert issubclass(StudyNotFoundError, StudyError)
    assert issubclass(StudyLockedError, StudyError)
    assert issubclass(StudyHasInterviewsError, StudyError)
    assert issubclass(InterviewNotFoundError, InterviewSystemError)
    assert issubclass(StorageUnavailableError, StorageError)


def test_exceptions_carry_message_and_details():
    from openinterviewer.core.exceptions import (
        InsufficientDataError,
        SessionNotFoundError,
        StudyLockedError,
    )

    with pytest.raises(SessionNotFoundError) as exc_info:
        raise SessionNotFoundError("Session test-123 not found")
    assert exc_info.value.message == "Session test-123 not found"

    locked = StudyLockedError("locked", interview_count=3)
    assert locked.interview_count == 3

    insufficient = InsufficientDataError("need more", minimum=2)
    assert insufficient.minimum == 2
    assert str(insufficient) == "need more"
