"""
Application settings management.

Settings are loaded from environment variables with .env file support.
All configuration is validated using Pydantic.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # ==========================================================================
    # Paths
    # ==========================================================================

    config_dir: Path = Field(
        default=Path("config"),
        description="Directory containing YAML configuration files",
    )

    # ==========================================================================
    # Storage
    # ==========================================================================

    database_path: Path = Field(
        default=Path("data/openinterviewer.db"),
        description="Path to the SQLite file backing the key-value store",
    )

    # ==========================================================================
    # AI Provider Configuration
    # ==========================================================================
    #
    # Provider priority: study config ai_provider > AI_PROVIDER > gemini.
    # Model priority: study config ai_model > AI_MODEL > provider default
    # (defaults are defined in openinterviewer/llm/client.py).

    ai_provider: Optional[str] = Field(
        default=None, description="Default AI provider (gemini or claude)"
    )
    ai_model: Optional[str] = Field(
        default=None, description="Override the provider's default model"
    )
    llm_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for a single AI call"
    )

    anthropic_api_key: Optional[str] = Field(
        default=None, description="Anthropic API key (claude provider)"
    )
    gemini_api_key: Optional[str] = Field(
        default=None, description="Google Gemini API key (gemini provider)"
    )

    # ==========================================================================
    # Server Configuration
    # ==========================================================================

    host: str = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Minimum level written to console and file")
    logs_dir: Path = Field(default=Path("logs"), description="Directory for per-run log files")


# ============================================================================
# Interview Configuration (from YAML)
# ============================================================================


class LimitsConfig(BaseModel):
    """Size limits applied at the boundary, and the live-session lifetime."""

    max_history_messages: int = Field(
        default=100, ge=1, description="Most recent transcript messages accepted"
    )
    max_synthesis_messages: int = Field(
        default=200, ge=1, description="Transcript messages sent for session synthesis"
    )
    max_message_length: int = Field(
        default=5000, ge=1, description="Characters kept per message"
    )
    max_context_length: int = Field(
        default=10000, ge=1, description="Characters kept of free-text context"
    )
    transcript_window: int = Field(
        default=10, ge=1, le=100, description="Recent messages sent to the collaborator"
    )
    session_idle_timeout_seconds: int = Field(
        default=3600,
        ge=1,
        description="Live sessions idle this long are dropped from the registry",
    )


class SynthesisConfig(BaseModel):
    """Aggregate synthesis and follow-up generation parameters."""

    min_interviews_for_aggregate: int = Field(
        default=2, ge=2, description="Minimum completed syntheses for aggregation"
    )
    followup_topic_limit: int = Field(
        default=5, ge=1, description="Common themes carried into follow-up topics"
    )
    followup_fallback_questions: int = Field(
        default=3, ge=1, description="Templated questions when the collaborator fails"
    )


class InterviewConfig(BaseModel):
    """
    Complete interview configuration loaded from interview_config.yaml.
    """

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)

    @field_validator("limits")
    @classmethod
    def window_within_history(cls, v: LimitsConfig) -> LimitsConfig:
        """Clamp the collaborator window to the accepted history size."""
        if v.transcript_window > v.max_history_messages:
            v.transcript_window = v.max_history_messages
        return v


CONFIG_FILENAME = "interview_config.yaml"

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _default_config_candidates(config_dir: Path) -> List[Path]:
    """Checked in order when no explicit path is given; the first existing file wins."""
    return [config_dir / CONFIG_FILENAME, PROJECT_ROOT / "config" / CONFIG_FILENAME]


def load_interview_config(
    config_path: Optional[Path] = None, config_dir: Optional[Path] = None
) -> InterviewConfig:
    """
    Load limits and synthesis parameters from YAML.

    A missing or empty file yields the built-in defaults; keys absent from
    the file keep their defaults too.

    Raises:
        pydantic.ValidationError: A value in the file is out of range
    """
    if config_path is not None:
        candidates = [Path(config_path)]
    else:
        candidates = _default_config_candidates(Path(config_dir or settings.config_dir))

    path = next((p for p in candidates if p.exists()), None)
    if path is None:
        return InterviewConfig()

    data = yaml.safe_load(path.read_text()) or {}
    return InterviewConfig.model_validate(data)


settings = Settings()

interview_config = load_interview_config()
