"""
Seed User

The account every seed script writes to. Configure with SEED_USER_EMAIL and
SEED_USER_PASSWORD.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.models.user import User

DEFAULT_SEED_EMAIL = 'demo@seed.local'
DEFAULT_SEED_PASSWORD = 'password123'


def seed_credentials():
    """(email, password) from the environment, with demo defaults."""
    return (
        os.getenv('SEED_USER_EMAIL', DEFAULT_SEED_EMAIL),
        os.getenv('SEED_USER_PASSWORD', DEFAULT_SEED_PASSWORD),
    )


def get_or_create_seed_user(email=None, password=None):
    """
    Find the seed user by email, creating it when missing.

    An existing user's password is left untouched.
    """
    default_email, default_password = seed_credentials()
    email = email or default_email
    user = User.get_by_email(email)
    if user:
        return user
    return User.create(email, password or default_password)
