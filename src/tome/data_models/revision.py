from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RevisionEntry(BaseModel):
    """One immutable revision of a document, as listed from disk."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    sequence: int  # position in append order, from 0


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str  # formatted for display


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
