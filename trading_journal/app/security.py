"""
Security Module

Provides security utilities and middleware for the Trading Journal:
- Rate limiting
- CORS configuration
- Session cookie hardening
- Security headers
"""
from datetime import timedelta

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Shared limiter; bound to the app in configure_rate_limiting().
# Reads RATELIMIT_ENABLED / RATELIMIT_DEFAULT / RATELIMIT_STORAGE_URI from config.
limiter = Limiter(key_func=get_remote_address, strategy='fixed-window')


def configure_security(app: Flask):
    """
    Configure all security settings for the application.

    Args:
        app: Flask application instance
    """
    configure_cors(app)
    configure_session_security(app)
    configure_security_headers(app)
    configure_rate_limiting(app)


def _is_production(app):
    return app.config.get('ENV_NAME') == 'production'


def configure_cors(app: Flask):
    """
    Configure Cross-Origin Resource Sharing (CORS).

    The session lives in a cookie, so credentials are always allowed and the
    origin list must be explicit.

    Args:
        app: Flask application instance
    """
    allowed_origins = [o.strip() for o in app.config.get('CORS_ORIGINS', '').split(',') if o.strip()]

    if _is_production(app) and not allowed_origins:
        app.logger.warning('No CORS_ORIGINS configured for production!')

    if not _is_production(app) and not allowed_origins:
        allowed_origins = ['http://localhost:3000', 'http://localhost:5000', 'http://127.0.0.1:5000']

    CORS(app, resources={
        r"/api/*": {
            "origins": allowed_origins,
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Requested-With"],
            "expose_headers": ["Content-Disposition"],
            "supports_credentials": True,
            "max_age": 600  # Cache preflight for 10 minutes
        }
    })


def configure_session_security(app: Flask):
    """
    Configure secure cookie settings.

    Args:
        app: Flask application instance
    """
    app.config.update(
        SESSION_COOKIE_SECURE=app.config.get('AUTH_COOKIE_SECURE', False),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        PERMANENT_SESSION_LIFETIME=app.config.get('AUTH_TOKEN_TTL', timedelta(days=7)),
    )


def configure_security_headers(app: Flask):
    """
    Add security headers to all responses.

    Args:
        app: Flask application instance
    """
    production = _is_production(app)

    @app.after_request
    def add_security_headers(response):
        """Add security headers to response."""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        # API responses carry per-user data
        if request.path.startswith('/api/'):
            response.headers['Cache-Control'] = 'no-store'

        if production:
            # Dash injects inline scripts and styles
            response.headers['Content-Security-Policy'] = (
                "default-src 'self'; "
                "script-src 'self' 'unsafe-inline' 'unsafe-eval'; "
                "style-src 'self' 'unsafe-inline'; "
                "img-src 'self' data: https:; "
                "font-src 'self' data:; "
                "connect-src 'self';"
            )
            response.headers['Strict-Transport-Security'] = (
                'max-age=31536000; includeSubDomains'
            )

        return response


def configure_rate_limiting(app: Flask):
    """
    Bind the shared flask-limiter instance to the app.

    Routes opt into tighter limits with @limiter.limit(auth_rate_limit).

    Args:
        app: Flask application instance
    """
    app.config.setdefault('RATELIMIT_HEADERS_ENABLED', True)
    limiter.init_app(app)

    if app.config.get('RATELIMIT_ENABLED', True):
        app.logger.info('Rate limiting enabled')
    else:
        app.logger.info('Rate limiting disabled')


def auth_rate_limit():
    """Limit string for login/register, resolved per request from config."""
    from flask import current_app
    return current_app.config.get('AUTH_RATE_LIMIT', '10 per minute')

