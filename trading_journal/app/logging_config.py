"""
Logging Configuration

Provides structured logging with rotation for the journal service.
Supports different log levels and formats for various environments.
"""
import os
import sys
import logging
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

import colorlog
from flask import request, has_request_context


class RequestFormatter(logging.Formatter):
    """Custom formatter that includes request context if available."""

    def format(self, record):
        if has_request_context():
            record.url = request.url
            record.remote_addr = request.remote_addr
            record.method = request.method
        else:
            record.url = '-'
            record.remote_addr = '-'
            record.method = '-'

        return super().format(record)


def _console_handler(level):
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(
        '%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))
    return handler


def setup_logging(app):
    """
    Configure application logging based on environment.

    Handlers are attached to the root logger so module loggers
    (logging.getLogger(__name__)) share them, and to app.logger.

    Args:
        app: Flask application instance
    """
    log_level = app.config.get('LOG_LEVEL', 'INFO')
    log_dir = app.config.get('LOG_DIR', 'logs')
    log_to_file = app.config.get('LOG_TO_FILE', True)
    is_production = app.config.get('ENV_NAME') == 'production'

    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    detailed_format = RequestFormatter(
        '%(asctime)s [%(levelname)s] %(name)s - %(remote_addr)s - %(method)s %(url)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    json_format = logging.Formatter(
        '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
        '"message": "%(message)s", "module": "%(module)s", "line": %(lineno)d}'
    )

    handlers = []

    if log_to_file and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    if is_production and log_to_file:
        # Main application log (rotating by size)
        app_handler = RotatingFileHandler(
            os.path.join(log_dir, 'app.log'),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=10,
            encoding='utf-8'
        )
        app_handler.setLevel(numeric_level)
        app_handler.setFormatter(detailed_format)
        handlers.append(app_handler)

        # Errors only
        error_handler = RotatingFileHandler(
            os.path.join(log_dir, 'error.log'),
            maxBytes=10 * 1024 * 1024,
            backupCount=10,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_format)
        handlers.append(error_handler)

        audit_handler = TimedRotatingFileHandler(
            os.path.join(log_dir, 'audit.log'),
            when='midnight',
            interval=1,
            backupCount=30,  # Keep 30 days
            encoding='utf-8'
        )
        audit_handler.setLevel(logging.INFO)
        audit_handler.setFormatter(json_format)
        handlers.append(audit_handler)
    else:
        handlers.append(_console_handler(numeric_level))

        if log_to_file:
            dev_file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'development.log'),
                maxBytes=5 * 1024 * 1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            dev_file_handler.setLevel(logging.DEBUG)
            dev_file_handler.setFormatter(detailed_format)
            handlers.append(dev_file_handler)

    root = logging.getLogger()
    for logger in (root, app.logger):
        logger.handlers.clear()
        logger.setLevel(numeric_level)
    for handler in handlers:
        root.addHandler(handler)
    # app.logger propagates to root
    app.logger.propagate = True

    if log_to_file:
        audit_logger.init_app(app)

    app.logger.info('Trading Journal logging initialized')
    app.logger.info(f'Log level: {log_level}')
    app.logger.info(f'Environment: {app.config.get("ENV_NAME", "development")}')


def setup_request_logging(app):
    """
    Set up request/response logging middleware.

    Args:
        app: Flask application instance
    """
    @app.before_request
    def log_request_info():
        """Log incoming request details."""
        app.logger.debug(
            f'Request: {request.method} {request.path} '
            f'from {request.remote_addr}'
        )

        if request.method in ['POST', 'PUT', 'PATCH'] and request.is_json:
            data = request.get_json(silent=True) or {}
            app.logger.debug(f'Request body: {sanitize_log_data(data)}')

    @app.after_request
    def log_response_info(response):
        """Log response details."""
        app.logger.info(
            f'{request.method} {request.path} '
            f'- {response.status_code} '
            f'({response.content_length or 0} bytes)'
        )

        return response


def sanitize_log_data(data: dict) -> dict:
    """
    Remove sensitive fields from data before logging.

    Args:
        data: Dictionary to sanitize

    Returns:
        Sanitized dictionary safe for logging
    """
    sensitive_fields = {
        'password', 'pwd', 'secret', 'token', 'api_key',
        'apikey', 'auth', 'credential', 'cookie'
    }

    if not isinstance(data, dict):
        return data

    sanitized = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(s in key_lower for s in sensitive_fields):
            sanitized[key] = '***REDACTED***'
        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        elif isinstance(value, list):
            sanitized[key] = [sanitize_log_data(v) for v in value]
        else:
            sanitized[key] = value

    return sanitized


class JournalAuditLogger:
    """Audit trail for journal writes (one pipe-delimited line per change)."""

    def __init__(self, app=None):
        self.logger = logging.getLogger('journal.audit')
        self._handler = None
        if app:
            self.init_app(app)

    def init_app(self, app):
        log_dir = app.config.get('LOG_DIR', 'logs')
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        if self._handler is not None:
            self.logger.removeHandler(self._handler)
            self._handler.close()

        self._handler = TimedRotatingFileHandler(
            os.path.join(log_dir, 'journal.log'),
            when='midnight',
            interval=1,
            backupCount=365,  # Keep 1 year of journal logs
            encoding='utf-8'
        )
        self._handler.setFormatter(logging.Formatter(
            '%(asctime)s|%(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(self._handler)
        self.logger.setLevel(logging.INFO)

    def log_trade(self, action: str, trade: dict):
        """Log a trade create/update/delete."""
        self.logger.info(
            f"TRADE|{action}|{trade.get('id')}|{trade.get('user_id')}|"
            f"{trade.get('instrument')}|{trade.get('direction')}|"
            f"{trade.get('position_size')}|{trade.get('entry_price')}|"
            f"{trade.get('exit_price')}|{trade.get('realized_pnl')}|"
            f"{trade.get('strategy_id')}"
        )

    def log_strategy(self, action: str, strategy: dict):
        """Log a strategy create/update/delete."""
        self.logger.info(
            f"STRATEGY|{action}|{strategy.get('id')}|{strategy.get('user_id')}|"
            f"{strategy.get('name')}|{int(bool(strategy.get('is_active')))}|"
            f"{len(strategy.get('technicals') or [])}"
        )


audit_logger = JournalAuditLogger()
