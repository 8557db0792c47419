"""
Database Module

Owns the SQLAlchemy engine, the request-scoped session and the declarative
base shared by all models. Configure via SQLALCHEMY_DATABASE_URI / DATABASE_URL.
"""
import os
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, scoped_session, declarative_base
from sqlalchemy.pool import StaticPool

# Create declarative base for models
Base = declarative_base()

# Database engine and session (initialized later)
_engine = None
_session_factory = None
_Session = None


def utcnow():
    """Naive UTC timestamp; all datetimes are stored as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_database_url():
    """
    Get database URL from environment.

    Returns:
        Database connection string
    """
    return os.getenv('DATABASE_URL', 'sqlite:///trading_journal.db')


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def init_db(app=None, database_url=None):
    """
    Initialize the database engine and session.

    Args:
        app: Flask application (optional, for config)
        database_url: Override database URL
    """
    global _engine, _session_factory, _Session

    if database_url is None:
        if app and 'SQLALCHEMY_DATABASE_URI' in app.config:
            database_url = app.config['SQLALCHEMY_DATABASE_URI']
        else:
            database_url = get_database_url()

    echo = bool(app.config.get('SQLALCHEMY_ECHO')) if app else False

    # Create engine with connection pooling
    engine_kwargs = {
        'pool_pre_ping': True,  # Verify connections before use
        'echo': echo,
    }

    if database_url.startswith('sqlite'):
        engine_kwargs['connect_args'] = {'check_same_thread': False}
        if ':memory:' in database_url:
            # One shared connection, otherwise every checkout sees an empty database
            engine_kwargs['poolclass'] = StaticPool
    else:
        engine_kwargs.update({
            'pool_size': 5,
            'max_overflow': 10,
            'pool_timeout': 30,
            'pool_recycle': 1800,
        })

    if _Session is not None:
        _Session.remove()

    _engine = create_engine(database_url, **engine_kwargs)
    if database_url.startswith('sqlite'):
        event.listen(_engine, 'connect', _enable_sqlite_foreign_keys)

    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    _Session = scoped_session(_session_factory)

    # Bind session to Base for query property
    Base.query = _Session.query_property()

    return _engine


def get_engine():
    """Get the database engine."""
    if _engine is None:
        init_db()
    return _engine


def get_scoped_session():
    """
    Get the scoped session registry.

    Calling it (or any session method on it) resolves to the session bound
    to the current thread.
    """
    if _Session is None:
        init_db()
    return _Session


def create_all():
    """Create all database tables."""
    # Import models so their tables are registered on Base.metadata
    import app.models  # noqa: F401
    Base.metadata.create_all(get_engine())


def drop_all():
    """Drop all database tables."""
    import app.models  # noqa: F401
    Base.metadata.drop_all(get_engine())


def close_session():
    """Close and remove the current session."""
    if _Session:
        _Session.remove()


@contextmanager
def transaction():
    """
    Run a unit of work in a single transaction.

    Commits when the block exits cleanly, rolls back and re-raises otherwise.

    Usage:
        with transaction() as session:
            session.add(obj)
    """
    session = get_scoped_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
