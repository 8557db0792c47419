"""
Configuration Management for Trading Journal

Supports multiple environments: development, testing, production.
Loads sensitive credentials from environment variables.
"""
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET = 'dev-secret-key-change-in-production-0000'


class Config:
    """Base configuration class."""

    ENV_NAME = 'development'

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', DEFAULT_SECRET)
    DEBUG = False
    TESTING = False

    # SQLAlchemy Configuration
    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return os.getenv('DATABASE_URL', 'sqlite:///trading_journal.db')

    SQLALCHEMY_ECHO = False  # Set to True to log SQL queries

    # Auth token (JWT in an HTTP-only cookie)
    @property
    def JWT_SECRET_KEY(self):
        return os.getenv('JWT_SECRET_KEY', self.SECRET_KEY)

    JWT_ALGORITHM = 'HS256'
    AUTH_COOKIE_NAME = os.getenv('AUTH_COOKIE_NAME', 'auth_token')
    AUTH_TOKEN_TTL = timedelta(days=int(os.getenv('AUTH_TOKEN_TTL_DAYS', '7')))
    AUTH_COOKIE_SECURE = False

    # Rate limiting (flask-limiter reads the RATELIMIT_* keys directly)
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', 'True').lower() == 'true'
    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '2000 per hour')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URL', 'memory://')
    AUTH_RATE_LIMIT = os.getenv('AUTH_RATE_LIMIT', '10 per minute')

    # CORS
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '')

    # API Settings
    JSON_SORT_KEYS = False

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_TO_FILE = True

    # Dashboard
    DISABLE_DASHBOARD = os.getenv('DISABLE_DASHBOARD', '0').lower() in ('1', 'true', 'yes')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'False').lower() == 'true'


class TestingConfig(Config):
    """Testing configuration."""
    ENV_NAME = 'testing'
    TESTING = True
    DEBUG = True

    SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    RATELIMIT_ENABLED = False
    LOG_TO_FILE = False

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        # Use in-memory SQLite for tests
        return 'sqlite:///:memory:'

    @property
    def JWT_SECRET_KEY(self):
        return self.SECRET_KEY


class ProductionConfig(Config):
    """Production configuration."""
    ENV_NAME = 'production'
    DEBUG = False
    TESTING = False

    # Stricter security in production
    AUTH_COOKIE_SECURE = True

    @property
    def JWT_SECRET_KEY(self):
        secret = os.getenv('JWT_SECRET_KEY') or os.getenv('SECRET_KEY')
        if not secret or secret == DEFAULT_SECRET:
            raise ValueError("Production requires JWT_SECRET_KEY (or SECRET_KEY) to be set")
        return secret


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV environment variable."""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
