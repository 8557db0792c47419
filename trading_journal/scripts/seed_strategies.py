"""
Seed Strategies

Replaces the seed user's strategies with three demo strategies and their
technical conditions. Existing trades are kept but detached first.

Usage:
    python scripts/seed_strategies.py
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.database import transaction
from app.models.strategy import Strategy
from app.models.technical_condition import TechnicalCondition
from app.models.trade import Trade
from app.services.strategy_service import StrategyService
from app.validation.schemas import StrategySchema
from scripts.seed_user import get_or_create_seed_user

SEED_STRATEGIES = [
    {
        'name': 'Elliott Wave Reversal',
        'short_code': 'REV_1D',
        'setup_description': 'Wait for completed 5-wave impulse, identify ABC correction, '
                             'enter on wave 5 completion with tight stop.',
        'notes': 'Best on daily timeframe. Requires clear wave structure.',
        'is_active': True,
        'technicals': [
            {'indicator': 'Elliott Wave', 'timeframe': '1D',
             'condition': 'Completed 5-wave impulse pattern', 'display_order': 1, 'is_required': True},
            {'indicator': 'RSI', 'timeframe': '1D',
             'condition': 'RSI > 70 (overbought) or RSI < 30 (oversold)', 'display_order': 2,
             'is_required': True},
            {'indicator': 'Volume', 'timeframe': '1D',
             'condition': 'Decreasing volume on wave 5', 'display_order': 3, 'is_required': False},
        ],
    },
    {
        'name': 'Support/Resistance Breakout',
        'short_code': 'BRK_H4',
        'setup_description': 'Identify key S/R levels, wait for consolidation, '
                             'enter on breakout with volume confirmation.',
        'notes': 'Works well in trending markets. Avoid during low volatility.',
        'is_active': True,
        'technicals': [
            {'indicator': 'Support/Resistance', 'timeframe': 'H4',
             'condition': 'Price testing key level 3+ times', 'display_order': 1, 'is_required': True},
            {'indicator': 'Volume', 'timeframe': 'H4',
             'condition': 'Volume spike on breakout (>150% of average)', 'display_order': 2,
             'is_required': True},
            {'indicator': 'Moving Average', 'timeframe': 'H4',
             'condition': 'Price above 50 EMA for long, below for short', 'display_order': 3,
             'is_required': False},
        ],
    },
    {
        'name': 'RSI Divergence Scalp',
        'short_code': 'SCAL_M15',
        'setup_description': 'Spot RSI divergence on 15min chart, enter on retest with tight 1:2 RR.',
        'notes': 'High frequency strategy. Requires quick execution.',
        'is_active': False,
        'technicals': [
            {'indicator': 'RSI', 'timeframe': 'M15',
             'condition': 'Bullish or bearish divergence forming', 'display_order': 1,
             'is_required': True},
            {'indicator': 'Price Action', 'timeframe': 'M15',
             'condition': 'Higher high/lower low with RSI showing opposite', 'display_order': 2,
             'is_required': True},
            {'indicator': 'Support/Resistance', 'timeframe': 'M15',
             'condition': 'Divergence occurring at key S/R level', 'display_order': 3,
             'is_required': True},
        ],
    },
]


def clear_strategies(user_id):
    """Detach the user's trades from strategies, then delete the strategies."""
    with transaction() as session:
        session.query(Trade).filter(Trade.user_id == user_id).update(
            {Trade.strategy_id: None}, synchronize_session=False
        )
        strategy_ids = [row.id for row in session.query(Strategy.id).filter(Strategy.user_id == user_id)]
        if strategy_ids:
            session.query(TechnicalCondition).filter(
                TechnicalCondition.strategy_id.in_(strategy_ids)
            ).delete(synchronize_session=False)
            session.query(Strategy).filter(Strategy.id.in_(strategy_ids)).delete(
                synchronize_session=False
            )
        session.expire_all()


def seed_strategies(user_id):
    """
    Replace the user's strategies with the demo set.

    Returns:
        list: Created Strategy instances
    """
    clear_strategies(user_id)

    service = StrategyService(user_id)
    schema = StrategySchema()
    created = []
    for raw in SEED_STRATEGIES:
        strategy = service.create_strategy(schema.load(raw))
        print(f"  Created: {strategy.name}")
        created.append(strategy)
    return created


def main():
    app = create_app()
    with app.app_context():
        user = get_or_create_seed_user()
        email = user.email
        print("Seeding strategies...")
        seed_strategies(user.id)
        print(f"Strategies seeded for {email}")


if __name__ == '__main__':
    main()
