"""Access grant supplied by the upstream gate.

Token signing and verification happen upstream; by the time a request
reaches this service, the grant is trusted.
"""

from typing import Optional

from pydantic import BaseModel

from openinterviewer.core.exceptions import AccessDeniedError


class AccessGrant(BaseModel):
    """Who is calling: a researcher, or a participant bound to one study."""

    study_id: Optional[str] = None
    is_researcher: bool = False

    def allows_study(self, study_id: Optional[str]) -> bool:
        """Researchers and unbound grants pass; bound participants need a match."""
        if self.is_researcher or not self.study_id or not study_id:
            return True
        return self.study_id == study_id

    def require_study(self, study_id: Optional[str]) -> None:
        if not self.allows_study(study_id):
            raise AccessDeniedError("Token not valid for this study")

    def require_researcher(self) -> None:
        if not self.is_researcher:
            raise AccessDeniedError("Researcher access required")
