"""Session bundle models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from monofile.rendering.models import ProcessingStats

SESSION_VERSION = 1


class ConceptBundle(BaseModel):
    """A feature concept reported by an external summarizer."""

    id: str
    name: str
    description: str


class SessionOutputs(BaseModel):
    """Generated outputs kept alongside the stats.

    Only ``flattened`` is produced locally; the other fields are filled by
    external collaborators and default to empty.
    """

    model_config = ConfigDict(populate_by_name=True)

    flattened: str
    summary: str = ""
    ai_context: str = Field(default="", alias="aiContext")
    concepts: List[ConceptBundle] = Field(default_factory=list)
    recreated_context: Optional[str] = Field(default=None, alias="recreatedContext")


class SessionBundle(BaseModel):
    """Versioned record of the last completed ingestion."""

    version: int = SESSION_VERSION
    key: str = "monofile_session"
    stats: ProcessingStats
    outputs: SessionOutputs
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_outputs(
        cls, stats: ProcessingStats, flattened: str, *, key: str = "monofile_session"
    ) -> "SessionBundle":
        """Return a new bundle for freshly generated outputs."""
        return cls(key=key, stats=stats, outputs=SessionOutputs(flattened=flattened))


__all__ = ["SESSION_VERSION", "ConceptBundle", "SessionBundle", "SessionOutputs"]
