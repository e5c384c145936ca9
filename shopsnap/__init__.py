"""
ShopSnap Backend - Flask Application Factory
"""

import logging
from flask import Flask
from shopsnap.config import Config

__version__ = "0.1.0"


def configure_logging(app: Flask) -> None:
    """Configure application-wide logging."""
    log_level = logging.DEBUG if app.debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app.logger.setLevel(log_level)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def create_app(config_class=Config):
    """Application factory pattern for creating Flask app instances."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Taxonomy is loaded once so a bad TAXONOMY_FILE fails at startup
    from shopsnap.categorization import load_taxonomy

    app.extensions["shopsnap.taxonomy"] = load_taxonomy(app.config.get("TAXONOMY_FILE"))

    from shopsnap.storage import create_storage

    app.extensions["shopsnap.storage"] = create_storage(app.config)

    # Enable CORS for the PWA frontend
    @app.after_request
    def add_cors_headers(response):
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, PATCH, DELETE, OPTIONS'
        return response

    # Register blueprints
    from shopsnap.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    # Register error handlers
    from shopsnap.errors import register_error_handlers

    register_error_handlers(app)

    from shopsnap.utils.cache import get_cache

    @app.route("/health")
    def health_check():
        return {
            "status": "healthy",
            "service": "shopsnap-backend",
            "version": __version__,
            "storage": app.config.get("STORAGE_BACKEND"),
            "cache": get_cache().stats(),
        }

    @app.route("/")
    def index():
        return {
            "service": "ShopSnap Backend API",
            "version": __version__,
            "description": "Shopping list capture, aisle categorization and price comparison API",
            "endpoints": {
                "health": "/health",
                "categories": "/api/v1/categories",
                "categorize": "/api/v1/categorize",
                "reconcile": "/api/v1/reconcile",
                "capture_manual": "/api/v1/capture/manual",
                "capture_image": "/api/v1/capture/image",
                "shopping_lists": "/api/v1/shopping-lists",
                "stores": "/api/v1/stores?lat={lat}&lng={lng}&radius={km}",
                "products": "/api/v1/products?search={query}",
            },
        }

    app.logger.info("ShopSnap Backend initialized successfully")
    return app
