"""
Trading Journal - Flask Application Factory
"""
import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from app.database import init_db, create_all, close_session

logger = logging.getLogger(__name__)


def create_app(config_class=None):
    """
    Application factory pattern for Flask app.

    Args:
        config_class: Configuration class to use. Defaults to get_config().

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        from app.config import get_config
        config_class = get_config()
    # Instantiate config class so that @property decorators work
    app.config.from_object(config_class())
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    # Setup logging first so startup messages land in the configured handlers
    from app.logging_config import setup_logging, setup_request_logging
    setup_logging(app)
    setup_request_logging(app)

    # Initialize database
    init_db(app)

    # Initialize security (includes CORS, cookie security, headers, rate limiting)
    from app.security import configure_security
    configure_security(app)

    # Register blueprints
    from app.api.auth_routes import auth_bp
    from app.api.trades_routes import trades_bp
    from app.api.strategy_routes import strategy_bp
    from app.api.health_routes import health_bp
    from app.pages import pages_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(trades_bp, url_prefix='/api/trades')
    app.register_blueprint(strategy_bp, url_prefix='/api/strategies')
    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(pages_bp)

    # Create database tables
    create_all()

    # Teardown - close session after each request
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        close_session()

    # Register error handlers
    register_error_handlers(app)

    return app


def register_error_handlers(app):
    """Render HTTP errors raised outside route handlers in the JSON envelope."""

    def envelope(message, status):
        return jsonify({'success': False, 'message': message}), status

    @app.errorhandler(400)
    def bad_request(error):
        return envelope(str(error.description) if error.description else 'Bad request', 400)

    @app.errorhandler(401)
    def unauthorized(error):
        return envelope('Unauthorized', 401)

    @app.errorhandler(404)
    def not_found(error):
        return envelope('The requested resource was not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return envelope('Method not allowed', 405)

    @app.errorhandler(429)
    def rate_limited(error):
        return envelope(f'Too many requests: {error.description}', 429)

    @app.errorhandler(500)
    def internal_error(error):
        return envelope('Internal server error', 500)

    @app.errorhandler(Exception)
    def unhandled_exception(error):
        if isinstance(error, HTTPException):
            return envelope(error.description or error.name, error.code or 500)
        logger.exception('Unhandled exception')
        return envelope('Internal server error', 500)
