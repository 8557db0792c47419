"""
Strategy Service

CRUD operations for user strategies and their technical-condition checklists,
plus per-strategy performance stats.

Supports:
- Owner-scoped listing with status/search filters and performance sorting
- Atomic replacement of the technical-condition list on update
- Detaching trades (not deleting them) when a strategy is deleted
"""
import logging

from app.database import transaction
from app.logging_config import audit_logger
from app.models.strategy import Strategy
from app.models.technical_condition import TechnicalCondition
from app.models.trade import Trade
from app.services.trade_metrics import (
    build_strategy_stats, build_strategy_leaderboard, empty_strategy_stats
)

logger = logging.getLogger(__name__)

STRATEGY_FIELDS = ('name', 'short_code', 'setup_description', 'notes', 'archived_reason')


class StrategyService:
    """
    Strategy operations for one user.
    """

    def __init__(self, user_id):
        """
        Initialize strategy service for a user.

        Args:
            user_id: Authenticated user id
        """
        self.user_id = user_id

    @staticmethod
    def _build_technicals(technicals):
        return [
            TechnicalCondition(
                indicator=item['indicator'],
                timeframe=item.get('timeframe'),
                condition=item['condition'],
                display_order=item.get('display_order') if item.get('display_order') is not None else position,
                is_required=1 if item.get('is_required', True) else 0
            )
            for position, item in enumerate(technicals, start=1)
        ]

    def _user_trades(self):
        return [trade.to_dict() for trade in Trade.get_user_trades(self.user_id)]

    def get_strategy(self, strategy_id):
        """
        Get one of the user's strategies.

        Returns:
            Strategy or None if not found (or owned by another user)
        """
        return Strategy.get_for_user(strategy_id, self.user_id)

    def list_strategies(self, status='all', search='', sort='performance-desc', include_stats=False):
        """
        List the user's strategies.

        Args:
            status: 'all', 'active' or 'archived'
            search: Case-insensitive name substring
            sort: 'performance-desc', 'performance-asc', 'created-desc' or 'created-asc'
            include_stats: Attach a `stats` dict to each strategy

        Returns:
            list: Strategy dicts with ordered technicals
        """
        query = Strategy.query_for_user(self.user_id)
        if status == 'active':
            query = query.filter(Strategy.is_active == 1)
        elif status == 'archived':
            query = query.filter(Strategy.is_active == 0)

        search = (search or '').strip()
        if search:
            pattern = search.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
            query = query.filter(Strategy.name.ilike(f'%{pattern}%', escape='\\'))

        strategies = query.order_by(Strategy.created_at.desc(), Strategy.id.desc()).all()

        stats = build_strategy_stats(self._user_trades()) if (
            include_stats or sort.startswith('performance')
        ) else {}

        rows = []
        for strategy in strategies:
            data = strategy.to_dict()
            if include_stats:
                data['stats'] = stats.get(strategy.id) or empty_strategy_stats()
            rows.append((strategy, data))

        if sort == 'created-asc':
            rows.reverse()
        elif sort.startswith('performance'):
            def pnl(row):
                return (stats.get(row[0].id) or empty_strategy_stats())['total_pnl']
            # rows are created-desc already; sort is stable so that stays the tie-break
            rows.sort(key=pnl, reverse=(sort == 'performance-desc'))
        return [data for _, data in rows]

    def create_strategy(self, data):
        """
        Create a strategy together with its technical conditions.

        Raises:
            IntegrityError: A strategy with this name already exists for the user
        """
        with transaction() as session:
            strategy = Strategy(
                user_id=self.user_id,
                name=data['name'],
                short_code=data.get('short_code'),
                setup_description=data.get('setup_description'),
                notes=data.get('notes'),
                is_active=1 if data.get('is_active', True) else 0,
                archived_reason=data.get('archived_reason'),
                technicals=self._build_technicals(data.get('technicals') or [])
            )
            session.add(strategy)

        # reload technicals in display_order
        session.expire(strategy, ['technicals'])
        logger.info(f'Strategy {strategy.id} "{strategy.name}" created for user {self.user_id}')
        audit_logger.log_strategy('CREATE', strategy.to_dict())
        return strategy

    def update_strategy(self, strategy_id, data):
        """
        Partially update a strategy.

        When `technicals` is present the whole list is replaced in the same
        transaction as the field update. Reactivating clears archived_reason
        unless a new one is sent.

        Returns:
            Updated Strategy, or None when missing or not owned

        Raises:
            IntegrityError: Renamed to a name the user already uses
        """
        strategy = self.get_strategy(strategy_id)
        if strategy is None:
            return None

        with transaction() as session:
            for field in STRATEGY_FIELDS:
                if field in data:
                    setattr(strategy, field, data[field])

            if 'is_active' in data:
                strategy.is_active = 1 if data['is_active'] else 0
                if data['is_active'] and not data.get('archived_reason'):
                    strategy.archived_reason = None

            if data.get('technicals') is not None:
                # delete-orphan cascade removes the previous rows
                strategy.technicals = self._build_technicals(data['technicals'])

        session.expire(strategy, ['technicals'])
        logger.info(f'Strategy {strategy_id} updated for user {self.user_id}')
        audit_logger.log_strategy('UPDATE', strategy.to_dict())
        return strategy

    def delete_strategy(self, strategy_id):
        """
        Delete a strategy.

        Trades tagged with it are kept and detached (strategy_id set to NULL);
        its conditions are removed. All in one transaction.

        Returns:
            bool: True if deleted, False when missing or not owned
        """
        strategy = self.get_strategy(strategy_id)
        if strategy is None:
            return False

        snapshot = strategy.to_dict()
        with transaction() as session:
            session.query(Trade).filter(
                Trade.user_id == self.user_id,
                Trade.strategy_id == strategy.id
            ).update({Trade.strategy_id: None}, synchronize_session='fetch')
            session.query(TechnicalCondition).filter(
                TechnicalCondition.strategy_id == strategy.id
            ).delete(synchronize_session=False)
            session.expire(strategy, ['technicals', 'trades'])
            session.delete(strategy)

        logger.info(f'Strategy {strategy_id} deleted for user {self.user_id}')
        audit_logger.log_strategy('DELETE', snapshot)
        return True

    def strategy_stats(self):
        """
        Stats for every strategy the user owns.

        Returns:
            dict: {strategy_id: summary + last_trade_at + top_instruments}
        """
        stats = build_strategy_stats(self._user_trades())
        strategy_ids = [s.id for s in Strategy.query_for_user(self.user_id).all()]
        return {sid: stats.get(sid) or empty_strategy_stats() for sid in strategy_ids}

    def get_strategy_stats(self, strategy_id):
        """Stats for one strategy, or None when missing or not owned."""
        if self.get_strategy(strategy_id) is None:
            return None
        trades = [t for t in self._user_trades() if t['strategy_id'] == strategy_id]
        return build_strategy_stats(trades).get(strategy_id) or empty_strategy_stats()

    def leaderboard(self, limit=3):
        """
        Best and worst active strategies by total PnL.

        Returns:
            dict: {'best': [...], 'worst': [...]}
        """
        strategies = [s.to_dict(include_technicals=False)
                      for s in Strategy.query_for_user(self.user_id).all()]
        stats = build_strategy_stats(self._user_trades())
        return build_strategy_leaderboard(strategies, stats, limit=limit)
