"""Flask application serving the CCTray and job-stats feeds.

Routes:
    GET /                                           index
    GET /health                                     liveness, no upstream call
    GET /cc.xml                                     CCTray XML feed
    GET /job-stats                                  JSON job statistics
    GET /pipelines/<pipeline>/jobs/<job>/resources  inputs of the last finished build

Every feed request runs a fresh fetch-and-map cycle against Concourse.
Upstream failures become 502 (504 on timeout) with a small JSON error body.
"""

from typing import Optional

import flask
from flask import Response, current_app, jsonify

from ccfeed.clients.exceptions import UpstreamAuthError, UpstreamError, UpstreamTimeoutError
from ccfeed.feed.assembler import FeedAssembler
from ccfeed.logging import get_logger
from ccfeed.rendering import CCTRAY_CONTENT_TYPE, FeedRenderer

logger = get_logger(__name__, component="http")

bp = flask.Blueprint("feeds", __name__)

INDEX_TEXT = (
    "Concourse CCTray feed\n"
    "\n"
    "  /cc.xml     CCTray project status\n"
    "  /job-stats  job statistics as JSON\n"
    "  /health     liveness check\n"
)


def _assembler() -> FeedAssembler:
    return current_app.extensions["ccfeed.assembler"]


def _renderer() -> FeedRenderer:
    return current_app.extensions["ccfeed.renderer"]


def _base_uri() -> str:
    return current_app.config["CONCOURSE_URL"]


@bp.route("/")
def index():
    return Response(INDEX_TEXT, mimetype="text/plain")


@bp.route("/health")
def health():
    return jsonify(status="ok")


@bp.route("/cc.xml")
def cctray():
    projects = _assembler().build_feed(_base_uri())
    return Response(_renderer().render_cctray(projects), content_type=CCTRAY_CONTENT_TYPE)


@bp.route("/job-stats")
def job_stats():
    stats = _assembler().build_stats(_base_uri())
    return jsonify(_renderer().render_stats(stats))


@bp.route("/pipelines/<pipeline>/jobs/<job>/resources")
def job_resources(pipeline, job):
    resources = _assembler().build_resources(pipeline, job)
    return jsonify(_renderer().render_resources(resources))


@bp.app_errorhandler(UpstreamError)
def upstream_error(error: UpstreamError):
    status = 504 if isinstance(error, UpstreamTimeoutError) else 502
    logger.error(
        f"Upstream failure while serving {flask.request.path}: {error}",
        extra={
            "event": "http.request.failed",
            "path": flask.request.path,
            "error_type": type(error).__name__,
            "status": status,
            "auth": isinstance(error, UpstreamAuthError),
        },
    )
    response = jsonify(error=type(error).__name__, message=str(error))
    response.status_code = status
    return response


def create_app(
    assembler: FeedAssembler,
    concourse_url: str,
    renderer: Optional[FeedRenderer] = None,
) -> flask.Flask:
    """Application factory.

    Args:
        assembler: Feed assembler wired with Concourse clients and credentials
        concourse_url: Concourse base URL used to build ``webUrl`` links
        renderer: Feed renderer (a default one is created when omitted)
    """
    app = flask.Flask(__name__)
    app.config["CONCOURSE_URL"] = concourse_url
    app.extensions["ccfeed.assembler"] = assembler
    app.extensions["ccfeed.renderer"] = renderer or FeedRenderer()
    app.register_blueprint(bp)

    logger.debug(
        "Flask application created",
        extra={"event": "http.app.created", "concourse_url": concourse_url},
    )
    return app
