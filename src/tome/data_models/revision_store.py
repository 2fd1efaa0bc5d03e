"""Filesystem-backed store of append-only document revisions.

Layout under the content root:

    index.md                      singleton Index content
    articles/<slug>/<id>.md       one immutable file per revision
    articles/<slug>/current.md    copy of the latest revision's content
    articles/.long-<sha256>/      document whose slug is too long for a file name
        slug                      the full slug

A revision id is "<creation time in ns, 20 digits>-<sequence, 8 digits>",
so ids sort by creation time and then by the order they were appended.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
import hashlib
import logging
import os
from pathlib import Path
import re
import threading
import uuid

from tome import slug
from tome.data_models.revision import RevisionEntry
from tome.errors import NotFound, StorageError, StoreTimeout

logger = logging.getLogger(__name__)

CURRENT_NAME = "current.md"
INDEX_NAME = "index.md"
SLUG_NAME = "slug"
LONG_PREFIX = ".long-"  # "." never starts an encoded slug
MAX_NAME_BYTES = 255
_SUFFIX = ".md"
_REVISION_ID_RE = re.compile(r"(\d{20})-(\d{8})")
_INDEX_LOCK_KEY = "/index"  # never a valid slug


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_ns(ts: datetime) -> int:
    return max(0, int(ts.timestamp()) * 10**9 + ts.microsecond * 1000)


def _from_ns(ns: int) -> datetime:
    return datetime.fromtimestamp(ns // 10**9, tz=UTC).replace(
        microsecond=(ns % 10**9) // 1000
    )


def make_revision_id(created_ns: int, sequence: int) -> str:
    return f"{created_ns:020d}-{sequence:08d}"


def parse_revision_id(value: str) -> RevisionEntry | None:
    """Return the entry an id describes, or None if it is not a revision id."""
    m = _REVISION_ID_RE.fullmatch(value)
    if m is None:
        return None
    return RevisionEntry(
        id=value, created_at=_from_ns(int(m.group(1))), sequence=int(m.group(2))
    )


def dir_name(key: str) -> str:
    """Directory name for a slug, hashed when the slug is too long to be one."""
    if len(key) <= MAX_NAME_BYTES:
        return key
    return LONG_PREFIX + hashlib.sha256(key.encode("ascii")).hexdigest()


def _write_new(path: Path, content: str) -> None:
    """Create path exclusively and fsync it before returning."""
    with open(path, "x", encoding="utf-8", newline="") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())


def _replace(path: Path, content: str) -> None:
    """Atomically replace path's content via a sibling temp file."""
    tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        _write_new(tmp, content)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


@dataclass
class _LockEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0  # holders plus waiters


class RevisionStore:
    def __init__(
        self,
        root: Path,
        clock: Callable[[], datetime] = _utcnow,
        lock_timeout: float = 10.0,
    ) -> None:
        self.root = root
        self.articles_dir = root / "articles"
        self.index_path = root / INDEX_NAME
        self._clock = clock
        self._lock_timeout = lock_timeout
        self._locks: dict[str, _LockEntry] = {}
        self._registry_lock = threading.Lock()
        try:
            self.articles_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create {self.articles_dir}: {exc}") from exc

    @contextmanager
    def _locked(self, key: str) -> Iterator[None]:
        """Serialize operations on one document without blocking the others.

        A registry entry lives only while someone holds or waits for it.
        """
        with self._registry_lock:
            entry = self._locks.setdefault(key, _LockEntry())
            entry.users += 1
        try:
            if not entry.lock.acquire(timeout=self._lock_timeout):
                raise StoreTimeout(
                    f"timed out after {self._lock_timeout}s waiting for {key!r}"
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            with self._registry_lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]

    def _doc_dir(self, title: str) -> tuple[str, Path]:
        key = slug.encode(title)
        return key, self.articles_dir / dir_name(key)

    def _scan(self, doc_dir: Path) -> list[RevisionEntry]:
        entries = []
        for child in doc_dir.iterdir():
            if child.suffix != _SUFFIX:
                continue
            entry = parse_revision_id(child.stem)
            if entry is not None:  # skips the alias and temp files
                entries.append(entry)
        entries.sort(key=lambda e: e.sequence)
        return entries

    def append(self, title: str, content: str) -> str:
        """Write a new revision, then point the current alias at it.

        Returns the new revision id.
        """
        key, doc_dir = self._doc_dir(title)
        created_ns = _to_ns(self._clock())
        with self._locked(key):
            try:
                doc_dir.mkdir(exist_ok=True)
                if doc_dir.name != key and not (doc_dir / SLUG_NAME).exists():
                    _replace(doc_dir / SLUG_NAME, key)
                existing = self._scan(doc_dir)
                sequence = existing[-1].sequence + 1 if existing else 0
                new_id = make_revision_id(created_ns, sequence)
                _write_new(doc_dir / f"{new_id}{_SUFFIX}", content)
                _replace(doc_dir / CURRENT_NAME, content)
            except OSError as exc:
                raise StorageError(f"cannot write {title!r}: {exc}") from exc
        logger.info("appended revision %s to %r", new_id, title)
        return new_id

    def read_current(self, title: str) -> str:
        key, doc_dir = self._doc_dir(title)
        with self._locked(key):
            try:
                return _read(doc_dir / CURRENT_NAME)
            except FileNotFoundError as exc:
                raise NotFound(f"no document {title!r}") from exc
            except OSError as exc:
                raise StorageError(f"cannot read {title!r}: {exc}") from exc

    def read_revision(self, title: str, revision_id: str) -> str:
        if parse_revision_id(revision_id) is None:
            raise NotFound(f"no revision {revision_id!r} of {title!r}")
        key, doc_dir = self._doc_dir(title)
        with self._locked(key):
            try:
                return _read(doc_dir / f"{revision_id}{_SUFFIX}")
            except FileNotFoundError as exc:
                raise NotFound(f"no revision {revision_id!r} of {title!r}") from exc
            except OSError as exc:
                raise StorageError(f"cannot read {title!r}: {exc}") from exc

    def list_revisions(self, title: str) -> list[RevisionEntry]:
        """Return every revision of title in append order; empty if absent."""
        key, doc_dir = self._doc_dir(title)
        with self._locked(key):
            try:
                return self._scan(doc_dir)
            except FileNotFoundError:
                return []
            except OSError as exc:
                raise StorageError(f"cannot list {title!r}: {exc}") from exc

    def list_documents(self) -> list[str]:
        """Return the slug of every document, order unspecified."""
        slugs = []
        try:
            for p in self.articles_dir.iterdir():
                if not p.is_dir():
                    continue
                if not p.name.startswith(LONG_PREFIX):
                    slugs.append(p.name)
                    continue
                try:
                    slugs.append(_read(p / SLUG_NAME))
                except FileNotFoundError:
                    logger.warning("no %s file in %s, skipping", SLUG_NAME, p)
        except OSError as exc:
            raise StorageError(f"cannot list {self.articles_dir}: {exc}") from exc
        return slugs

    def read_index(self) -> str:
        """Return the Index content, or "" if it was never written."""
        with self._locked(_INDEX_LOCK_KEY):
            try:
                return _read(self.index_path)
            except FileNotFoundError:
                return ""
            except OSError as exc:
                raise StorageError(f"cannot read {self.index_path}: {exc}") from exc

    def write_index(self, content: str) -> None:
        with self._locked(_INDEX_LOCK_KEY):
            try:
                _replace(self.index_path, content)
            except OSError as exc:
                raise StorageError(f"cannot write {self.index_path}: {exc}") from exc
        logger.info("replaced index content")
