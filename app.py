import logging
import uuid
from typing import Any, Mapping, Optional

import click
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from extensions import db, limiter, migrate
from routes.admin_routes import admin_bp
from routes.auth_routes import auth_bp
from routes.payment_routes import payment_bp
from utils.errors import PaymentNotFound, ReceiptRejected, ValidationFailed

# Generic 500 messages per endpoint, shown instead of exception details
SERVER_ERROR_MESSAGES = {
    "auth.register": "Error al registrar usuario",
    "auth.login": "Error al iniciar sesión",
    "auth.logout": "Error al cerrar sesión",
    "auth.me": "Error al obtener información del usuario",
    "payments.list_payments": "Error al obtener pagos",
    "payments.summary": "Error al obtener pagos",
    "payments.upload_receipt": "Error al subir comprobante",
    "payments.activity": "Error al obtener actividad",
    "admin.list_guardians": "Error al obtener apoderados",
}


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)

    # Load configuration from Config, then any explicit overrides (tests, scripts)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.json.ensure_ascii = False
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO))

    # Trust reverse proxy headers for scheme/host when enabled; the client
    # address only when explicitly configured, since it keys the login limit
    if app.config.get("TRUST_PROXY", True):
        x_for = 1 if app.config.get("TRUST_FORWARDED_FOR", False) else 0
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=x_for, x_proto=1, x_host=1)  # type: ignore[method-assign]

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(payment_bp)
    app.register_blueprint(admin_bp)

    _register_request_hooks(app)
    _register_error_handlers(app)
    _register_commands(app)

    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    with app.app_context():
        import models  # noqa: F401 - registers tables on db.metadata

        db.create_all()
        if app.config.get("SEED_DEMO_DATA"):
            from utils.demo import seed_demo_data

            seed_demo_data()

    return app


def _register_request_hooks(app: Flask) -> None:
    # Assign a per-request correlation id for tracing
    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:16]

    # Set security headers on every response
    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if app.config.get("SESSION_COOKIE_SECURE", False):
            resp.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        if g.get("request_id"):
            resp.headers["X-Request-ID"] = g.request_id
        return resp


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationFailed)
    def _validation_failed(exc: ValidationFailed):
        return jsonify({"message": exc.message, "errors": exc.errors}), 400

    @app.errorhandler(PaymentNotFound)
    def _payment_not_found(exc: PaymentNotFound):
        app.logger.info("Upload for unknown period: %s", exc)
        return jsonify({"message": "Pago no encontrado"}), 404

    @app.errorhandler(ReceiptRejected)
    def _receipt_rejected(exc: ReceiptRejected):
        return jsonify({"message": str(exc)}), 400

    @app.errorhandler(413)
    def _too_large(_exc):
        limit_mb = int(app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        return jsonify({"message": f"El archivo supera el tamaño máximo permitido ({limit_mb}MB)"}), 413

    @app.errorhandler(404)
    def _not_found(_exc):
        return jsonify({"message": "Recurso no encontrado"}), 404

    @app.errorhandler(429)
    def _rate_limited(_exc):
        return jsonify({"message": "Demasiados intentos, intente nuevamente más tarde"}), 429

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify({"message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def _server_error(exc: Exception):
        db.session.rollback()
        app.logger.exception("Unhandled error [request_id=%s] on %s", g.get("request_id"), request.path)
        message = SERVER_ERROR_MESSAGES.get(request.endpoint or "", "Error interno del servidor")
        return jsonify({"message": message}), 500


def _register_commands(app: Flask) -> None:
    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Create the demo guardian (juan@example.com) if missing."""
        from utils.demo import seed_demo_data

        guardian = seed_demo_data()
        if guardian is None:
            click.echo("Demo data already present; nothing to do.")
        else:
            click.echo(f"Demo guardian created: {guardian.email}")

    @app.cli.command("create-admin")
    @click.option("--email", required=True)
    @click.option("--name", default="Administrador")
    @click.option("--phone", default="")
    @click.password_option()
    def create_admin_command(email: str, name: str, phone: str, password: str):
        """Create an admin account, or promote an existing guardian."""
        from utils.admins import ensure_admin

        try:
            guardian, created = ensure_admin(email, password, name=name, phone=phone)
        except ValueError as e:
            raise click.ClickException(f"Could not create admin: {e}")
        click.echo(f"{'Created' if created else 'Promoted'} admin: {guardian.email}")
