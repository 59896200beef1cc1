"""Flask application: the /api query endpoint plus static files on every other path."""

from flask import Flask, Response, request
from flask_cors import CORS

from serve_api.api import query_api
from serve_api.api.errors import ServeApiError, StoreUnavailable
from serve_api.config.loader import ServeConfig
from serve_api.server.static_files import serve_path
from serve_api.utils.logging import get_logger

logger = get_logger(__name__)


def _text_response(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def create_app(config: ServeConfig) -> Flask:
    """
    Build the Flask app for a resolved config.

    The app holds no per-request state: every /api call opens and closes its
    own store connection.
    """
    app = Flask(__name__, static_folder=None)
    app.config["SERVE"] = config
    CORS(app, resources={r"/api": {"origins": "*", "methods": ["GET"]}})

    @app.errorhandler(ServeApiError)
    def serve_api_error(error: ServeApiError) -> Response:
        if isinstance(error, StoreUnavailable):
            logger.error(f"Store unavailable at {config.database}: {error.detail}", exc_info=error)
        else:
            logger.debug(f"Rejected {request.full_path.rstrip('?')}: {error.message}")
        return _text_response(error.message, error.status_code)

    @app.get("/api")
    def api() -> Response:
        body = query_api.handle(request.args, config.database)
        return Response(body, status=200, mimetype="application/json")

    @app.get("/", defaults={"subpath": ""})
    @app.get("/<path:subpath>")
    def static_files(subpath: str) -> Response:
        if config.verbose:
            logger.info(f"Serving {request.full_path.rstrip('?')}")
        return serve_path(config.directory, subpath)

    return app
