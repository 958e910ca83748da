import time

from flask import Flask, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from library_ledger.config import Config
from library_ledger.extensions import db, migrate, jwt
from library_ledger.utils.validation import IdConverter

MAX_LOGGED_BODY = 500


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.url_map.converters["id"] = IdConverter

    # models must be imported before create_all / migrate can see them
    from library_ledger.models import book, borrower, loan  # noqa: F401

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from library_ledger.controllers.book_controller import book_bp
    from library_ledger.controllers.borrower_controller import borrower_bp
    from library_ledger.controllers.loan_controller import loan_bp
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(borrower_bp, url_prefix="/borrowers")
    app.register_blueprint(loan_bp, url_prefix="/loans")

    from library_ledger.cli import init_db_command, seed_db_command
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_db_command)

    @app.before_request
    def log_request():
        g.request_started = time.perf_counter()
        body = request.get_data(as_text=True) if request.method in ("POST", "PUT", "PATCH") else ""
        if len(body) > MAX_LOGGED_BODY:
            body = body[:MAX_LOGGED_BODY] + "..."
        app.logger.info(
            f"[http] request {request.method} {request.path}"
            f"{'?' + request.query_string.decode('utf-8', 'replace') if request.query_string else ''}"
            f"{' body=' + body if body else ''}"
        )

    @app.after_request
    def log_response(response):
        started = g.pop("request_started", None)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        app.logger.info(
            f"[http] response {request.method} {request.path} status={response.status_code} "
            f"request completed in {elapsed_ms:.0f}ms"
        )
        return response

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        db.session.rollback()
        app.logger.exception(f"[app] database error: {e}")
        return jsonify({"success": False, "message": "Database error", "error": type(e).__name__}), 500

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        app.logger.exception(f"[app] unhandled exception: {e}")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return app
