"""Flask application exposing assertion generation and export.

A thin boundary: each route validates its body with the pydantic request
model, calls the matching service and returns its payload. Service
failures become HTTP 500 responses with the message as the body and the
error code in a header.
"""

from __future__ import annotations

import logging

from flask import Flask, Response, g, jsonify, request
from pydantic import ValidationError

from src.assertions.errors import ERROR_CODE_KEY, RaireErrorCode, RaireServiceException
from src.assertions.schema import GenerateAssertionsRequest, GetAssertionsRequest
from src.assertions.service import GenerateAssertionsService, Solver
from src.db.repo import Repository
from src.export.service import GetAssertionsService

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Set by init_app
_db_path: str | None = None
_enable_wal: bool = True
_solver: Solver | None = None


def get_repo() -> Repository:
    """Get the repository instance for the current request.

    Creates a new connection per request to handle Flask's threading model.
    """
    if _db_path is None:
        raise RuntimeError("Database path not initialized. Call init_app() first.")

    if "repo" not in g:
        g.repo = Repository(_db_path)
        g.repo.connect(enable_wal=_enable_wal)

    return g.repo


@app.teardown_appcontext
def close_repo(exception):
    """Close the repository connection at the end of each request."""
    repo = g.pop("repo", None)
    if repo is not None:
        repo.close()


def init_app(db_path: str, solver: Solver | None = None, enable_wal: bool = True) -> Flask:
    """Initialize the Flask app.

    Args:
        db_path: Path to the SQLite database
        solver: Callable producing a solver result for a generation request
        enable_wal: Open connections in WAL mode

    Returns:
        Configured Flask app
    """
    global _db_path, _solver, _enable_wal
    _db_path = db_path
    _solver = solver
    _enable_wal = enable_wal
    return app


# =============================================================================
# Routes
# =============================================================================


@app.route("/raire/generate-assertions", methods=["POST"])
def generate_assertions():
    """Generate and store assertions for one contest; returns the winner."""
    body = GenerateAssertionsRequest.model_validate(request.get_json(force=True))
    service = GenerateAssertionsService(get_repo(), solver=_solver)
    response = service.generate(body)
    return jsonify(response.model_dump(by_alias=True))


@app.route("/raire/get-assertions-json", methods=["POST"])
def get_assertions_json():
    """Stored assertions for one contest as a structured report."""
    body = GetAssertionsRequest.model_validate(request.get_json(force=True))
    return jsonify(GetAssertionsService(get_repo()).get_json(body))


@app.route("/raire/get-assertions-csv", methods=["POST"])
def get_assertions_csv():
    """Stored assertions for one contest as CSV text."""
    body = GetAssertionsRequest.model_validate(request.get_json(force=True))
    csv = GetAssertionsService(get_repo()).get_csv(body)
    return Response(csv, mimetype="text/csv")


# =============================================================================
# Error Handlers
# =============================================================================


@app.errorhandler(RaireServiceException)
def service_error(e: RaireServiceException):
    """Handle assertion service failures."""
    logger.error(f"[{request.path}] {e.error_code.value}: {e.message}")
    return Response(
        e.message,
        status=500,
        mimetype="text/plain",
        headers={ERROR_CODE_KEY: e.error_code.value},
    )


@app.errorhandler(ValidationError)
def validation_error(e: ValidationError):
    """Handle malformed request bodies."""
    details = e.errors(include_url=False, include_context=False, include_input=False)
    return jsonify({"error": "Invalid request", "details": details}), 400


@app.errorhandler(500)
def server_error(e):
    """Handle unexpected errors."""
    return Response(
        f"Server error: {e}",
        status=500,
        mimetype="text/plain",
        headers={ERROR_CODE_KEY: RaireErrorCode.INTERNAL_ERROR.value},
    )
