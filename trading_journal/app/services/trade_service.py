"""
Trade Service

Owner-scoped CRUD for journal trades. Every lookup filters on the user id
given to the service, so another user's trade behaves exactly like a
missing one.

Input dictionaries are expected to be already loaded through TradeSchema.
"""
import logging

from app.database import transaction
from app.logging_config import audit_logger
from app.models.strategy import Strategy
from app.models.trade import Trade
from app.services.trade_filters import apply_filters
from app.services.trade_metrics import (
    summarize_trades, group_trades_by_month, build_instrument_leaderboard
)
from app.validation.schemas import check_trade_consistency

logger = logging.getLogger(__name__)

TRADE_FIELDS = (
    'strategy_id', 'instrument', 'direction', 'entry_datetime', 'exit_datetime',
    'entry_price', 'exit_price', 'position_size', 'realized_pnl', 'r_multiple', 'platform'
)


class StrategyNotFoundError(LookupError):
    """The referenced strategy does not exist or belongs to someone else."""


class TradeService:
    """
    Trade operations for one user.
    """

    def __init__(self, user_id):
        """
        Initialize trade service for a user.

        Args:
            user_id: Authenticated user id
        """
        self.user_id = user_id

    def _check_strategy(self, strategy_id):
        if strategy_id is None:
            return
        if Strategy.get_for_user(strategy_id, self.user_id) is None:
            raise StrategyNotFoundError('Strategy not found')

    def _current_values(self, trade):
        return {field: getattr(trade, field) for field in TRADE_FIELDS}

    def get_all_trades(self):
        """All of the user's trades as dicts, newest entry first."""
        return [trade.to_dict() for trade in Trade.get_user_trades(self.user_id)]

    def list_trades(self, filters=None, now=None):
        """
        List trades with the journal filters applied.

        Args:
            filters: Loaded TradeFilterSchema dict (range, status, search, ...)
            now: Reference time for relative date presets

        Returns:
            list: Trade dicts
        """
        return apply_filters(self.get_all_trades(), filters, now=now)

    def get_trade(self, trade_id):
        """Trade instance, or None when missing or not owned."""
        return Trade.get_for_user(trade_id, self.user_id)

    def create_trade(self, data):
        """
        Create a trade.

        Raises:
            StrategyNotFoundError: strategy_id is not one of the user's strategies
        """
        self._check_strategy(data.get('strategy_id'))

        values = {field: data.get(field) for field in TRADE_FIELDS}
        check_trade_consistency(values)

        with transaction() as session:
            trade = Trade(user_id=self.user_id, **values)
            session.add(trade)

        trade = self.get_trade(trade.id)
        logger.info(f'Trade {trade.id} created for user {self.user_id}')
        audit_logger.log_trade('CREATE', trade.to_dict())
        return trade

    def update_trade(self, trade_id, data, partial=False):
        """
        Update a trade.

        A full update (partial=False) replaces every field; optional fields
        missing from `data` are cleared. A partial update merges `data` over
        the stored values. Clearing exit_datetime reopens the trade and clears
        stored exit fields the request does not resend.

        Returns:
            Updated Trade, or None when missing or not owned

        Raises:
            StrategyNotFoundError: strategy_id is not one of the user's strategies
            ValidationError: exit fields inconsistent after merging
        """
        trade = self.get_trade(trade_id)
        if trade is None:
            return None

        if data.get('strategy_id') is not None:
            self._check_strategy(data['strategy_id'])

        if partial:
            merged = self._current_values(trade)
            merged.update({k: v for k, v in data.items() if k in TRADE_FIELDS})
            if 'exit_datetime' in data and data['exit_datetime'] is None:
                for field in Trade.EXIT_FIELDS:
                    if field not in data:
                        merged[field] = None
            check_trade_consistency(merged, provided=set(data))
        else:
            merged = {field: data.get(field) for field in TRADE_FIELDS}
            check_trade_consistency(merged)

        with transaction() as session:
            for field, value in merged.items():
                setattr(trade, field, value)

        # strategy_id may have changed under an already-loaded relationship
        session.expire(trade, ['strategy'])
        logger.info(f'Trade {trade_id} updated for user {self.user_id}')
        audit_logger.log_trade('UPDATE', trade.to_dict())
        return trade

    def delete_trade(self, trade_id):
        """
        Delete a trade.

        Returns:
            bool: True if deleted, False when missing or not owned
        """
        trade = self.get_trade(trade_id)
        if trade is None:
            return False

        snapshot = trade.to_dict()
        with transaction() as session:
            session.delete(trade)

        logger.info(f'Trade {trade_id} deleted for user {self.user_id}')
        audit_logger.log_trade('DELETE', snapshot)
        return True

    def get_stats(self, filters=None, now=None):
        """
        Summary, monthly PnL and top instruments for the filtered trades.

        Returns:
            dict: {summary, by_month, top_instruments}
        """
        trades = self.list_trades(filters, now=now)
        return {
            'summary': summarize_trades(trades),
            'by_month': group_trades_by_month(trades),
            'top_instruments': build_instrument_leaderboard(trades)
        }

