"""Set of existing document titles, derived from the store's directories."""

import logging

from tome import slug
from tome.data_models.revision import CatalogEntry
from tome.data_models.revision_store import RevisionStore
from tome.errors import DecodeError

logger = logging.getLogger(__name__)


def overview(store: RevisionStore) -> list[CatalogEntry]:
    entries = []
    for name in store.list_documents():
        try:
            title = slug.decode(name)
        except DecodeError:
            logger.warning("skipping undecodable document directory %r", name)
            continue
        entries.append(CatalogEntry(slug=name, title=title))
    return entries
