"""Shared base for wire-facing domain models.

Every model serializes with camelCase aliases so stored records and HTTP
payloads keep the browser client's field names, while Python code uses
snake_case attributes. Timestamps are integer epoch milliseconds.
"""

import time

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class CamelModel(BaseModel):
    """BaseModel accepting both snake_case names and camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Dump with camelCase keys, suitable for storage and JSON responses."""
        return self.model_dump(by_alias=True, mode="json")
