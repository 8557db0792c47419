"""
Auth API Routes

Endpoints for user registration, login, logout, and session lookup.
Provides the login_required decorator for protecting journal routes.
"""
import logging
from functools import wraps

from flask import Blueprint, request, g
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from app.api.responses import success_response, error_response, validation_error_response
from app.database import get_scoped_session
from app.models.user import User
from app.security import limiter, auth_rate_limit
from app.services.auth_service import get_current_user, login_user, delete_auth_cookie
from app.validation.schemas import LoginSchema, RegisterSchema

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

login_schema = LoginSchema()
register_schema = RegisterSchema()


def login_required(f):
    """Decorator that requires a valid session cookie."""
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return error_response('Unauthorized', 401)
        g.current_user = user
        return f(*args, **kwargs)
    return decorated


@auth_bp.route('/register', methods=['POST'])
@limiter.limit(auth_rate_limit)
def register():
    """
    POST /api/auth/register
    Create a new user account. Auto-logs in on success.

    Request body:
    {
        "email": "trader@example.com",
        "password": "secret123",
        "username": "trader_01"
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response('No data provided', 400)

    try:
        payload = register_schema.load(data)
    except ValidationError as e:
        return validation_error_response(e)

    if User.get_by_email(payload['email']):
        return error_response('Email already registered', 409)
    if payload.get('username') and User.get_by_username(payload['username']):
        return error_response('Username already taken', 409)

    try:
        user = User.create(payload['email'], payload['password'], username=payload.get('username'))
    except IntegrityError:
        # Lost a race with a concurrent registration
        get_scoped_session().rollback()
        return error_response('Email or username already registered', 409)
    except Exception:
        logger.exception('Registration failed')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    logger.info(f'User {user.id} registered')
    response, status = success_response({'user': user.to_dict()}, 201)
    login_user(response, user)
    return response, status


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(auth_rate_limit)
def login():
    """
    POST /api/auth/login
    Verify credentials and set the session cookie.

    Request body:
    {
        "identifier": "trader@example.com",   (or "email" / "username")
        "password": "secret123"
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response('No data provided', 400)

    try:
        payload = login_schema.load(data)
    except ValidationError as e:
        return validation_error_response(e)

    try:
        user = User.verify(payload['identifier'], payload['password'])
    except Exception:
        logger.exception('Login lookup failed')
        return error_response('Internal server error', 500)

    if user is None:
        logger.info('Failed login attempt')
        return error_response('Invalid email or password', 401)

    response, status = success_response({'user': user.to_dict()})
    login_user(response, user)
    return response, status


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """
    POST /api/auth/logout
    Clear the session cookie.
    """
    response, status = success_response(None, message='Logged out')
    delete_auth_cookie(response)
    return response, status


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """
    GET /api/auth/me
    Return the current user.
    """
    return success_response({'user': g.current_user.to_dict()})
