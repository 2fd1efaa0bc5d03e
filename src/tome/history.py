"""Newest-first revision listing for one document."""

from tome.data_models.revision import HistoryEntry
from tome.data_models.revision_store import RevisionStore

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def history(store: RevisionStore, title: str) -> list[HistoryEntry]:
    """Return title's revisions sorted by creation time, newest first.

    Revisions with equal timestamps are ordered by append order, latest first.
    """
    revisions = store.list_revisions(title)
    ordered = sorted(
        revisions, key=lambda r: (r.created_at, r.sequence), reverse=True
    )
    return [
        HistoryEntry(id=r.id, timestamp=r.created_at.strftime(TIMESTAMP_FORMAT))
        for r in ordered
    ]
