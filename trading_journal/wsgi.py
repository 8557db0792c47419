"""
WSGI Entry Point

This module creates the application instance for production WSGI servers
like Gunicorn or uWSGI.

Usage with Gunicorn:
    gunicorn wsgi:app -c gunicorn.conf.py
"""
import logging
import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import create_app
from app.config import get_config

logger = logging.getLogger(__name__)

# Create Flask application with environment-based configuration
flask_app = create_app(get_config())

# Mount the Dash dashboard unless disabled
dash_app = None
if not flask_app.config.get('DISABLE_DASHBOARD'):
    from dashboard import create_dash_app
    dash_app = create_dash_app(flask_app)
    logger.info('Dashboard mounted at /dashboard/')
else:
    logger.info('Dashboard disabled, running in API-only mode')

# WSGI application entry point
app = flask_app

if __name__ == "__main__":
    app.run()
