"""
Seed Trades

Replaces the seed user's trades with four demo trades. Each trade is linked
to its strategy by name when the user has a strategy with that name.

Usage:
    python scripts/seed_trades.py
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.database import transaction
from app.models.strategy import Strategy
from app.models.trade import Trade
from app.services.trade_service import TradeService
from app.validation.schemas import TradeSchema
from scripts.seed_user import get_or_create_seed_user

SEED_TRADES = [
    {
        'strategy_name': 'Support/Resistance Breakout',
        'instrument': 'BTCUSDT',
        'direction': 'long',
        'entry_datetime': '2024-10-02T09:15:00Z',
        'exit_datetime': '2024-10-04T12:45:00Z',
        'entry_price': 62000,
        'exit_price': 64850,
        'position_size': 0.5,
        'realized_pnl': 1425,
        'r_multiple': 2.3,
    },
    {
        'strategy_name': 'Support/Resistance Breakout',
        'instrument': 'ETHUSDT',
        'direction': 'short',
        'entry_datetime': '2024-10-05T15:30:00Z',
        'exit_datetime': '2024-10-06T10:00:00Z',
        'entry_price': 3360,
        'exit_price': 3295,
        'position_size': 10,
        'realized_pnl': 650,
        'r_multiple': 1.1,
    },
    {
        'strategy_name': None,
        'instrument': 'AAPL',
        'direction': 'long',
        'entry_datetime': '2024-10-07T14:00:00Z',
        'exit_datetime': '2024-10-10T20:10:00Z',
        'entry_price': 182.4,
        'exit_price': 176.9,
        'position_size': 200,
        'realized_pnl': -1100,
        'r_multiple': -0.8,
    },
    {
        'strategy_name': 'Elliott Wave Reversal',
        'instrument': 'SPX500',
        'direction': 'short',
        'entry_datetime': '2024-10-12T08:30:00Z',
        'exit_datetime': None,
        'entry_price': 5468,
        'exit_price': None,
        'position_size': 2,
        'realized_pnl': None,
        'r_multiple': None,
    },
]


def clear_trades(user_id):
    with transaction() as session:
        session.query(Trade).filter(Trade.user_id == user_id).delete(synchronize_session=False)
        session.expire_all()


def seed_trades(user_id):
    """
    Replace the user's trades with the demo set.

    Returns:
        list: Created Trade instances
    """
    strategy_ids = {
        strategy.name: strategy.id
        for strategy in Strategy.query_for_user(user_id).all()
    }

    clear_trades(user_id)

    service = TradeService(user_id)
    schema = TradeSchema()
    created = []
    for seed in SEED_TRADES:
        raw = {key: value for key, value in seed.items() if key != 'strategy_name'}
        raw['strategy_id'] = strategy_ids.get(seed['strategy_name'])
        created.append(service.create_trade(schema.load(raw)))
    return created


def main():
    app = create_app()
    with app.app_context():
        user = get_or_create_seed_user()
        email = user.email
        print("Seeding trades...")
        trades = seed_trades(user.id)
        print(f"{len(trades)} trades seeded for {email}")


if __name__ == '__main__':
    main()
