import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, g, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from marketplace.core.config import Config
from marketplace.core.dependencies import DependencyContainer
from marketplace.core.exceptions import BaseAPIException, InternalServerError
from marketplace.db import Database
from marketplace.i18n.middleware import init_locale_middleware
from marketplace.integrations import StripeGateway
from marketplace.repositories import (
    CategoryRepository, OrderRepository, ProductRepository, TenantRepository, UserRepository
)
from marketplace.routes import (
    admin_bp, cart_bp, categories_bp, checkout_bp, products_bp, storefront_bp, stripe_webhooks_bp
)
from marketplace.routes.utils import success_response
from marketplace.services import CategoryService, CheckoutService, ProductService, StripeWebhookService

logger = logging.getLogger(__name__)


def build_container(config: Config, gateway: Optional[StripeGateway] = None) -> DependencyContainer:
    """Wire the database, Stripe gateway, repositories and services of one app."""
    container = DependencyContainer()
    database = Database(config.database)

    container.register_singleton(Config, config)
    container.register_singleton(Database, database)
    container.register_singleton(StripeGateway, gateway or StripeGateway(config.stripe))

    for repository in (TenantRepository, UserRepository, CategoryRepository, ProductRepository, OrderRepository):
        container.register_factory(repository, lambda repository=repository: repository(database))

    container.register_factory(CategoryService, lambda: CategoryService(container.get(CategoryRepository)))
    container.register_factory(ProductService, lambda: ProductService(
        container.get(ProductRepository), container.get(CategoryRepository), config
    ))
    container.register_factory(CheckoutService, lambda: CheckoutService(
        container.get(StripeGateway),
        container.get(UserRepository),
        container.get(TenantRepository),
        container.get(ProductService),
        config,
    ))
    container.register_factory(StripeWebhookService, lambda: StripeWebhookService(
        container.get(StripeGateway),
        container.get(UserRepository),
        container.get(TenantRepository),
        container.get(OrderRepository),
    ))
    return container


def _error_envelope(code: str, message: str, status: int, details=None):
    body = {
        "success": False,
        "message": message,
        "error": {"code": code, "message": message, "details": details or {}},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    request_id = getattr(g, "request_id", None)
    if request_id:
        body["request_id"] = request_id
    return jsonify(body), status


def create_app(config: Optional[Config] = None, stripe_gateway: Optional[StripeGateway] = None) -> Flask:
    """
    Application factory.

    Tests pass their own Config (in-memory SQLite) and a mocked Stripe
    gateway; production builds both from the environment.
    """
    config = config or Config.from_env()
    config.validate()

    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.app.secret_key
    app.config["ENVIRONMENT"] = config.app.environment

    container = build_container(config, stripe_gateway)
    app.extensions["container"] = container
    container.get(Database).create_all()

    @app.before_request
    def assign_request_id():
        g.request_id = uuid.uuid4().hex[:8]

    init_locale_middleware(app)

    app.register_blueprint(stripe_webhooks_bp, url_prefix="/api/stripe")
    app.register_blueprint(categories_bp,      url_prefix="/api/categories")
    app.register_blueprint(products_bp,        url_prefix="/api/v1/products")
    app.register_blueprint(cart_bp,            url_prefix="/api/v1")
    app.register_blueprint(checkout_bp,        url_prefix="/api/v1")
    app.register_blueprint(admin_bp,           url_prefix="/admin")
    app.register_blueprint(storefront_bp)

    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code} [{getattr(g, 'request_id', '-')}]: {e.internal_message}")
        else:
            logger.warning(f"{e.error_code} [{getattr(g, 'request_id', '-')}]: {e.message}")
        return _error_envelope(e.error_code, e.message, e.status_code, e.details)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        if e.code is None or e.code < 400:
            return e
        code = (e.name or "error").upper().replace(" ", "_")
        return _error_envelope(code, str(e.description), e.code)

    @app.errorhandler(SQLAlchemyError)
    def db_error(e):
        logger.exception("Unhandled database error")
        return _error_envelope("DATABASE_ERROR", "A database error occurred.", 500)

    @app.errorhandler(Exception)
    def unhandled_error(e: Exception):
        logger.exception(f"Unhandled error [{getattr(g, 'request_id', '-')}]")
        error = InternalServerError(str(e))
        return _error_envelope(error.error_code, error.message, error.status_code, error.details)

    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            container.get(Database).ping()
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return _error_envelope("SERVICE_UNAVAILABLE", "Database unreachable.", 503)
        return success_response({"status": "ok", "database": "reachable"})

    logger.info(f"Marketplace app created ({config.app.environment})")
    return app


if __name__ == "__main__":
    cfg = Config.from_env()
    application = create_app(cfg)
    application.run(debug=cfg.app.debug, host=cfg.app.host, port=cfg.app.port)
