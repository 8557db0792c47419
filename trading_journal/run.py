"""
Development Entry Point

Run this script to start the Trading Journal with the Flask threaded server.
Usage: python run.py

Environment variables:
    PORT               - Port number (default: 5000)
    DATABASE_URL       - SQLAlchemy database URL (default: sqlite:///trading_journal.db)
    DISABLE_DASHBOARD  - Set to 1 to disable dashboard
    FLASK_ENV          - development, testing or production (default: development)
"""
import os
import sys
import socket

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from wsgi import app


def main():
    """Start the Trading Journal."""
    port = int(os.environ.get("PORT", "5000"))
    env = app.config.get("ENV_NAME", "development")
    dashboard = "disabled" if app.config.get("DISABLE_DASHBOARD") else "enabled"

    # Get the actual IP address for the access URL
    try:
        ip_addr = socket.gethostbyname(socket.gethostname())
    except OSError:
        ip_addr = "127.0.0.1"
    access_url = "http://%s:%s" % (ip_addr, port)

    print("")
    print("  +============================================================+")
    print("  |         Trading Journal - Server                           |")
    print("  +============================================================+")
    print("  |  PID:        %-43s |" % os.getpid())
    print("  |  Access:     %-43s |" % access_url)
    print("  |  Health:     %-43s |" % (access_url + "/api/health"))
    print("  |  Dashboard:  %-43s |" % (access_url + "/dashboard/" if dashboard == "enabled" else "disabled"))
    print("  |  Database:   %-43s |" % app.config.get("SQLALCHEMY_DATABASE_URI", "")[:43])
    print("  |  Environment:%-43s |" % (" " + env))
    print("  |                                                            |")
    print("  |  Press Ctrl+C to stop                                      |")
    print("  +============================================================+")
    print("")

    app.run(
        host="0.0.0.0",
        port=port,
        threaded=True,
        debug=env == "development",
        use_reloader=False,
    )


if __name__ == "__main__":
    main()
