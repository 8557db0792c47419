"""
Auth Service

Password hashing, signed session tokens and the auth cookie.

A session is a PyJWT HS256 token carrying the user id, email and username,
stored in an HTTP-only cookie. Every request that needs identity verifies the
token and loads the user row; any failure means "no user".
"""
import logging
from datetime import datetime, timezone

import jwt
from flask import current_app, g, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

logger = logging.getLogger(__name__)


def hash_password(password):
    """Salted, iterated hash of a plain-text password."""
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """Check a plain-text password against a stored hash."""
    if not password or not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # Unknown hash method in the stored value
        return False


def create_token(user, now=None):
    """
    Issue a signed session token for a user.

    Args:
        user: User instance (or dict with id/email/username)
        now: Issue time override (for tests)

    Returns:
        Encoded JWT string
    """
    if isinstance(user, dict):
        user_id, email, username = user['id'], user.get('email'), user.get('username')
    else:
        user_id, email, username = user.id, user.email, user.username

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        'user_id': user_id,
        'email': email,
        'username': username,
        'iat': issued_at,
        'exp': issued_at + current_app.config['AUTH_TOKEN_TTL'],
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM']
    )


def verify_token(token):
    """
    Decode and validate a session token.

    Returns:
        The token claims, or None when the token is missing, malformed,
        badly signed or expired.
    """
    if not token:
        return None
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']]
        )
    except jwt.ExpiredSignatureError:
        logger.debug('Rejected expired session token')
        return None
    except jwt.InvalidTokenError:
        logger.debug('Rejected invalid session token')
        return None


def get_current_user():
    """
    Resolve the authenticated user for the current request.

    The result is cached on flask.g for the rest of the request.

    Returns:
        User instance or None
    """
    if 'current_user' in g:
        return g.current_user

    user = None
    payload = verify_token(request.cookies.get(current_app.config['AUTH_COOKIE_NAME']))
    if payload and payload.get('user_id') is not None:
        from app.models.user import User
        try:
            user = User.get_by_id(payload['user_id'])
        except (SQLAlchemyError, TypeError, ValueError):
            logger.exception('Could not load user for session token')
            user = None

    g.current_user = user
    return user


def set_auth_cookie(response, token):
    """Attach the session token to a response as an HTTP-only cookie."""
    ttl = current_app.config['AUTH_TOKEN_TTL']
    response.set_cookie(
        current_app.config['AUTH_COOKIE_NAME'],
        token,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=current_app.config['AUTH_COOKIE_SECURE'],
        samesite='Lax',
        path='/'
    )
    return response


def delete_auth_cookie(response):
    """Remove the session cookie."""
    response.delete_cookie(
        current_app.config['AUTH_COOKIE_NAME'],
        path='/',
        httponly=True,
        secure=current_app.config['AUTH_COOKIE_SECURE'],
        samesite='Lax'
    )
    g.pop('current_user', None)
    return response


def login_user(response, user):
    """Issue a token for the user and set it on the response."""
    g.current_user = user
    return set_auth_cookie(response, create_token(user))
