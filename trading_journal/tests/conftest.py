"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests including:
- Flask application on an in-memory SQLite database
- Test clients, anonymous and signed in as two different users
- Table cleanup between tests
- Request payload builders
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.config import TestingConfig
from app.database import get_scoped_session, close_session
from app.models import User, Strategy, TechnicalCondition, Trade

PASSWORD = 'secret123'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    return create_app(TestingConfig)


@pytest.fixture(autouse=True)
def clean_tables(app):
    """Empty every table before each test."""
    session = get_scoped_session()
    session.query(Trade).delete()
    session.query(TechnicalCondition).delete()
    session.query(Strategy).delete()
    session.query(User).delete()
    session.commit()
    close_session()
    yield
    get_scoped_session().rollback()
    close_session()


@pytest.fixture
def client(app):
    """Create test client for API testing."""
    return app.test_client()


def register(client, email, password=PASSWORD, username=None):
    """Register through the API; the client keeps the session cookie."""
    body = {'email': email, 'password': password}
    if username:
        body['username'] = username
    response = client.post('/api/auth/register', json=body)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']['user']


@pytest.fixture
def auth_client(app):
    """Client signed in as trader@example.com."""
    client = app.test_client()
    client.user = register(client, 'trader@example.com', username='trader')
    return client


@pytest.fixture
def other_client(app):
    """Client signed in as a second, unrelated user."""
    client = app.test_client()
    client.user = register(client, 'other@example.com', username='other')
    return client


def trade_payload(**overrides):
    """A valid closed long trade."""
    payload = {
        'instrument': 'BTCUSDT',
        'direction': 'long',
        'entry_datetime': '2024-10-02T09:15:00Z',
        'exit_datetime': '2024-10-04T12:45:00Z',
        'entry_price': 62000,
        'exit_price': 64850,
        'position_size': 0.5,
        'realized_pnl': 1425,
        'r_multiple': 2.3,
        'platform': 'Binance',
    }
    payload.update(overrides)
    return payload


def strategy_payload(**overrides):
    """A valid active strategy with two conditions."""
    payload = {
        'name': 'Support/Resistance Breakout',
        'short_code': 'BRK_H4',
        'setup_description': 'Breakout of a tested level',
        'notes': 'Trending markets only',
        'technicals': [
            {'indicator': 'Support/Resistance', 'timeframe': 'H4', 'condition': 'Level tested 3+ times'},
            {'indicator': 'Volume', 'timeframe': 'H4', 'condition': 'Spike on breakout', 'is_required': False},
        ],
    }
    payload.update(overrides)
    return payload


def create_trade(client, **overrides):
    response = client.post('/api/trades', json=trade_payload(**overrides))
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


def create_strategy(client, **overrides):
    response = client.post('/api/strategies', json=strategy_payload(**overrides))
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


@pytest.fixture
def sample_strategy(auth_client):
    """Strategy owned by auth_client's user (as a dict)."""
    return create_strategy(auth_client)


@pytest.fixture
def sample_trades(auth_client, sample_strategy):
    """Three closed trades and one open trade owned by auth_client's user."""
    return [
        create_trade(auth_client, strategy_id=sample_strategy['id']),
        create_trade(
            auth_client,
            instrument='ETHUSDT', direction='short',
            entry_datetime='2024-10-05T15:30:00Z', exit_datetime='2024-10-06T10:00:00Z',
            entry_price=3360, exit_price=3295, position_size=10,
            realized_pnl=650, r_multiple=1.1, strategy_id=sample_strategy['id']
        ),
        create_trade(
            auth_client,
            instrument='AAPL',
            entry_datetime='2024-11-07T14:00:00Z', exit_datetime='2024-11-10T20:10:00Z',
            entry_price=182.4, exit_price=176.9, position_size=200,
            realized_pnl=-1100, r_multiple=-0.8, platform=None
        ),
        create_trade(
            auth_client,
            instrument='SPX500', direction='short',
            entry_datetime='2024-11-12T08:30:00Z', exit_datetime=None,
            entry_price=5468, exit_price=None, position_size=2,
            realized_pnl=None, r_multiple=None, platform=None
        ),
    ]
