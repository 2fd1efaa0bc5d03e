"""Flask front end for the tome wiki.

Usage:
    python -m tome --config tome.yaml
"""

from __future__ import annotations

import logging

from flask import (
    Blueprint,
    Flask,
    abort,
    current_app,
    redirect,
    render_template_string,
    request,
    send_from_directory,
    url_for,
)

from tome.catalog import overview
from tome.config import TomeConfig
from tome.data_models.revision_store import RevisionStore
from tome.errors import NotFound, StorageError, StoreTimeout
from tome.history import history
from tome.media import is_allowed, list_media, save_upload
from tome.render import render
from tome.web.templates import (
    ARTICLE_TEMPLATE,
    EDITOR_TEMPLATE,
    HISTORY_TEMPLATE,
    INDEX_TEMPLATE,
    MEDIA_TEMPLATE,
    OVERVIEW_TEMPLATE,
)

logger = logging.getLogger(__name__)

bp = Blueprint("tome", __name__)


def _store() -> RevisionStore:
    return current_app.extensions["tome.store"]


def _config() -> TomeConfig:
    return current_app.extensions["tome.config"]


@bp.get("/")
def index():
    content = _store().read_index()
    return render_template_string(
        INDEX_TEMPLATE, page_title="Index", html=render(content)
    )


@bp.post("/")
def update_index():
    _store().write_index(request.form.get("content", ""))
    return redirect(url_for("tome.index"), code=303)


@bp.get("/edit/index")
def edit_index():
    return render_template_string(
        EDITOR_TEMPLATE,
        page_title="Editing Index",
        title="Index",
        action=url_for("tome.update_index"),
        content=_store().read_index(),
    )


@bp.get("/overview")
def overview_page():
    entries = sorted(overview(_store()), key=lambda e: e.title)
    return render_template_string(
        OVERVIEW_TEMPLATE, page_title="All articles", entries=entries
    )


@bp.get("/article/<title>")
def get_article(title: str):
    try:
        content = _store().read_current(title)
    except NotFound:
        return redirect(url_for("tome.edit_article", title=title), code=307)
    return render_template_string(
        ARTICLE_TEMPLATE,
        page_title=title,
        title=title,
        version=None,
        html=render(content),
    )


@bp.post("/article/<title>")
def post_article(title: str):
    revision_id = _store().append(title, request.form.get("content", ""))
    logger.info("saved %r as revision %s", title, revision_id)
    return redirect(url_for("tome.get_article", title=title), code=303)


@bp.get("/edit/article/<title>")
def edit_article(title: str):
    try:
        content = _store().read_current(title)
    except NotFound:
        content = ""
    return render_template_string(
        EDITOR_TEMPLATE,
        page_title=f"Editing {title}",
        title=title,
        action=url_for("tome.post_article", title=title),
        content=content,
    )


@bp.get("/article/<title>/history")
def article_history(title: str):
    return render_template_string(
        HISTORY_TEMPLATE,
        page_title=f"History of {title}",
        title=title,
        entries=history(_store(), title),
    )


@bp.get("/article/<title>/history/<version>")
def article_version(title: str, version: str):
    try:
        content = _store().read_revision(title, version)
    except NotFound:
        abort(404)
    return render_template_string(
        ARTICLE_TEMPLATE,
        page_title=title,
        title=title,
        version=version,
        html=render(content),
    )


@bp.get("/media")
def media_overview():
    config = _config()
    return render_template_string(
        MEDIA_TEMPLATE,
        page_title="Media",
        allowed_uploads=", ".join(config.allowed_uploads),
        media=list_media(config.media_dir),
    )


@bp.post("/media")
def upload_media():
    config = _config()
    for upload in request.files.getlist("image"):
        filename = upload.filename or ""
        if not is_allowed(filename, config.allowed_uploads):
            logger.warning("rejected upload %r", filename)
            continue
        save_upload(config.media_dir, filename, upload.stream)
    return redirect(url_for("tome.media_overview"), code=303)


@bp.get("/media/<filename>")
def media_file(filename: str):
    return send_from_directory(_config().media_dir.resolve(), filename)


@bp.get("/favicon.ico")
def favicon():
    return send_from_directory(_config().media_dir.resolve(), "favicon.ico")


@bp.app_errorhandler(StorageError)
def storage_error(exc: StorageError):
    logger.error("storage failure: %s", exc)
    return "Storage error", 500


@bp.app_errorhandler(StoreTimeout)
def store_timeout(exc: StoreTimeout):
    logger.warning("lock timeout: %s", exc)
    return "Document busy, try again", 503


def create_app(store: RevisionStore, config: TomeConfig) -> Flask:
    app = Flask(__name__)
    app.extensions["tome.store"] = store
    app.extensions["tome.config"] = config
    app.register_blueprint(bp)
    return app


def main(config: TomeConfig) -> None:
    store = RevisionStore(config.content_dir, lock_timeout=config.lock_timeout)
    app = create_app(store, config)
    print(f"Serving {config.content_dir} on http://{config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=False)
