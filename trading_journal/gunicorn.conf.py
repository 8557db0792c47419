"""
Gunicorn Configuration for Production

Usage:
    gunicorn wsgi:app -c gunicorn.conf.py
    python -m gunicorn wsgi:app -c gunicorn.conf.py
"""
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker configuration
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
worker_class = "gthread"
max_requests = 1000
max_requests_jitter = 50

# Load the app before forking workers
preload_app = True

# Timeout configuration
timeout = 60
graceful_timeout = 30
keepalive = 5

# Process naming
proc_name = "trading-journal"

# Server mechanics
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

# Logging
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = os.getenv("ACCESS_LOG", "-")
errorlog = os.getenv("ERROR_LOG", "-")
access_log_format = "%%(h)s %%(l)s %%(u)s %%(t)s \"%%(r)s\" %%(s)s %%(b)s \"%%(f)s\" \"%%(a)s\" %%(D)s"

# For production with file logging, set environment variables:
#   ACCESS_LOG=/var/log/trading-journal/access.log
#   ERROR_LOG=/var/log/trading-journal/error.log

if os.getenv("FLASK_ENV") == "development":
    accesslog = "-"
    errorlog = "-"
    loglevel = "debug"


# Lifecycle hooks

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Trading Journal server is ready")


def post_fork(server, worker):
    """Drop connections inherited from the preloaded master."""
    from app.database import get_engine
    get_engine().dispose()


def on_exit(server):
    """Called just before exiting Gunicorn."""
    server.log.info("Trading Journal shutting down")
