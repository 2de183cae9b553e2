# noqa
from openinterviewer.llm.prompts.interview import (
    get_interview_system_prompt,
    get_interview_user_prompt,
    format_transcript,
)
from openinterviewer.llm.prompts.greeting import (
    get_greeting_prompt,
    get_default_greeting,
)
from openinterviewer.llm.prompts.synthesis import (
    SYNTHESIS_SYSTEM_PROMPT,
    get_session_synthesis_prompt,
    get_aggregate_synthesis_prompt,
)
from openinterviewer.llm.prompts.followup import get_followup_prompt

__all__ = [
    "get_interview_system_prompt",
    "get_interview_user_prompt",
    "format_transcript",
    "get_greeting_prompt",
    "get_default_greeting",
    "SYNTHESIS_SYSTEM_PROMPT",
    "get_session_synthesis_prompt",
    "get_aggregate_synthesis_prompt",
    "get_followup_prompt",
]
