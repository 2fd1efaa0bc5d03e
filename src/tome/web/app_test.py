import io
from pathlib import Path

from flask.testing import FlaskClient
import pytest

from tome.config import TomeConfig
from tome.data_models.revision_store import RevisionStore
from tome.errors import StorageError
from tome.history import history
from tome.web.app import create_app


@pytest.fixture
def store(tmp_path: Path) -> RevisionStore:
    return RevisionStore(tmp_path / "content")


@pytest.fixture
def client(tmp_path: Path, store: RevisionStore) -> FlaskClient:
    config = TomeConfig(content_dir=tmp_path / "content", allowed_uploads=[".png"])
    return create_app(store, config).test_client()


def test_missing_article_redirects_to_editor(client: FlaskClient) -> None:
    resp = client.get("/article/New%20Page")
    assert resp.status_code == 307
    assert resp.headers["Location"].endswith("/edit/article/New%20Page")


def test_editor_for_missing_article_is_empty(client: FlaskClient) -> None:
    resp = client.get("/edit/article/New%20Page")
    assert resp.status_code == 200
    assert b'cols="100"></textarea>' in resp.data


def test_post_then_get_article(client: FlaskClient, store: RevisionStore) -> None:
    resp = client.post("/article/Home%20Base", data={"content": "See [Other Page]."})
    assert resp.status_code == 303
    assert store.read_current("Home Base") == "See [Other Page]."

    resp = client.get("/article/Home%20Base")
    assert resp.status_code == 200
    assert b'<a href="/article/Other Page">Other Page</a>' in resp.data


def test_editor_shows_raw_content(client: FlaskClient, store: RevisionStore) -> None:
    store.append("Page", "# <Raw>")
    resp = client.get("/edit/article/Page")
    assert b"# &lt;Raw&gt;" in resp.data


def test_history_lists_revisions(client: FlaskClient, store: RevisionStore) -> None:
    store.append("Page", "one")
    store.append("Page", "two")
    resp = client.get("/article/Page/history")
    assert resp.status_code == 200
    for entry in history(store, "Page"):
        assert f"/article/Page/history/{entry.id}".encode() in resp.data


def test_history_of_missing_article(client: FlaskClient) -> None:
    resp = client.get("/article/Nothing/history")
    assert resp.status_code == 200
    assert b"No revisions yet." in resp.data


def test_specific_revision(client: FlaskClient, store: RevisionStore) -> None:
    first = store.append("Page", "**first**")
    store.append("Page", "second")
    resp = client.get(f"/article/Page/history/{first}")
    assert resp.status_code == 200
    assert b"<strong>first</strong>" in resp.data


def test_missing_revision_is_404(client: FlaskClient, store: RevisionStore) -> None:
    store.append("Page", "x")
    missing = "/article/Page/history/00000000000000000000-00000099"
    assert client.get(missing).status_code == 404
    assert client.get("/article/Page/history/garbage").status_code == 404


def test_index_round_trip(client: FlaskClient, store: RevisionStore) -> None:
    assert client.get("/").status_code == 200
    resp = client.post("/", data={"content": "# Welcome"})
    assert resp.status_code == 303
    assert store.read_index() == "# Welcome"
    assert b"<h1>Welcome</h1>" in client.get("/").data
    assert b"# Welcome" in client.get("/edit/index").data


def test_overview_lists_titles(client: FlaskClient, store: RevisionStore) -> None:
    store.append("B", "x")
    store.append("A b", "y")
    resp = client.get("/overview")
    body = resp.data.decode()
    assert '<a href="/article/A%20b">A b</a>' in body
    assert body.index("A b") < body.index(">B<")


def test_media_upload_filters_extensions(client: FlaskClient, tmp_path: Path) -> None:
    resp = client.post(
        "/media",
        data={"image": (io.BytesIO(b"png"), "ok.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 303
    client.post(
        "/media",
        data={"image": (io.BytesIO(b"txt"), "bad.txt")},
        content_type="multipart/form-data",
    )
    media_dir = tmp_path / "content" / "media"
    assert sorted(p.name for p in media_dir.iterdir()) == ["ok.png"]

    listing = client.get("/media").data
    assert b"ok.png" in listing
    assert b"bad.txt" not in listing
    assert client.get("/media/ok.png").data == b"png"


def test_storage_error_is_500(
    client: FlaskClient, store: RevisionStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail(title: str, content: str) -> str:
        raise StorageError("disk full")

    monkeypatch.setattr(store, "append", fail)
    assert client.post("/article/Page", data={"content": "x"}).status_code == 500


def test_lock_timeout_is_503(tmp_path: Path) -> None:
    store = RevisionStore(tmp_path / "content", lock_timeout=0.05)
    config = TomeConfig(content_dir=tmp_path / "content")
    client = create_app(store, config).test_client()
    with store._locked("Page"):
        assert client.get("/article/Page").status_code == 503


def test_favicon_served_from_media(client: FlaskClient, tmp_path: Path) -> None:
    assert client.get("/favicon.ico").status_code == 404
    media_dir = tmp_path / "content" / "media"
    media_dir.mkdir(parents=True)
    (media_dir / "favicon.ico").write_bytes(b"ico")
    resp = client.get("/favicon.ico")
    assert resp.status_code == 200
    assert resp.data == b"ico"
