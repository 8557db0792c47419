"""
Server-rendered auth pages

Plain HTML forms for signing in and registering. On success the session
cookie is set and the browser is sent to the dashboard.
"""
import logging

from flask import Blueprint, render_template, request, redirect
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from app.database import get_scoped_session
from app.models.user import User
from app.security import limiter, auth_rate_limit
from app.services.auth_service import get_current_user, login_user, delete_auth_cookie
from app.validation.schemas import LoginSchema, RegisterSchema, format_validation_error

logger = logging.getLogger(__name__)

pages_bp = Blueprint('pages', __name__, template_folder='templates')

DASHBOARD_URL = '/dashboard/'


@pages_bp.route('/')
def index():
    if get_current_user() is not None:
        return redirect(DASHBOARD_URL)
    return redirect('/login')


@pages_bp.route('/login', methods=['GET', 'POST'])
@limiter.limit(auth_rate_limit, methods=['POST'])
def login():
    if request.method == 'GET':
        if get_current_user() is not None:
            return redirect(DASHBOARD_URL)
        return render_template('login.html', error=None, identifier='')

    identifier = request.form.get('identifier', '')
    try:
        payload = LoginSchema().load({
            'identifier': identifier,
            'password': request.form.get('password', '')
        })
    except ValidationError as e:
        return render_template('login.html', error=format_validation_error(e),
                               identifier=identifier), 400

    user = User.verify(payload['identifier'], payload['password'])
    if user is None:
        return render_template('login.html', error='Invalid email or password',
                               identifier=identifier), 401

    return login_user(redirect(DASHBOARD_URL), user)


@pages_bp.route('/register', methods=['GET', 'POST'])
@limiter.limit(auth_rate_limit, methods=['POST'])
def register():
    if request.method == 'GET':
        return render_template('register.html', error=None, form={})

    form = {key: request.form.get(key, '') for key in ('email', 'username')}
    try:
        payload = RegisterSchema().load({
            'email': form['email'],
            'username': form['username'],
            'password': request.form.get('password', '')
        })
    except ValidationError as e:
        return render_template('register.html', error=format_validation_error(e), form=form), 400

    if User.get_by_email(payload['email']):
        return render_template('register.html', error='Email already registered', form=form), 409
    if payload.get('username') and User.get_by_username(payload['username']):
        return render_template('register.html', error='Username already taken', form=form), 409

    try:
        user = User.create(payload['email'], payload['password'], username=payload.get('username'))
    except IntegrityError:
        get_scoped_session().rollback()
        return render_template('register.html', error='Email or username already registered',
                               form=form), 409

    logger.info(f'User {user.id} registered')
    return login_user(redirect(DASHBOARD_URL), user)


@pages_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    return delete_auth_cookie(redirect('/login'))
