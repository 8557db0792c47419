"""
Data Callbacks

Loads the signed-in user's journal and renders the summary cards and trade list.
"""
import logging
from datetime import datetime

from dash import Output, Input
from dash.exceptions import PreventUpdate
from marshmallow import ValidationError

from app.services.auth_service import get_current_user
from app.services.trade_filters import resolve_date_range, filter_trades, sort_trades
from app.services.trade_metrics import (
    summarize_trades, group_trades_by_month, build_instrument_leaderboard
)
from app.services.trade_service import TradeService
from app.validation.schemas import TradeFilterSchema, format_validation_error
from dashboard.layouts.components.trade_list import (
    create_trade_card, format_money, ALL_STRATEGIES
)

logger = logging.getLogger(__name__)

HIDDEN = {"display": "none"}
VISIBLE = {"display": "block"}


def build_filters(range_value=None, date_from=None, date_to=None, status=None,
                  search=None, strategy_value=None):
    """
    Collect the filter controls into a validated filter dict.

    Raises:
        ValidationError: Bad custom dates or an unknown option
    """
    raw = {
        'range': range_value or 'all',
        'status': status or 'all',
        'search': search or '',
    }
    if date_from:
        raw['from'] = date_from.strip()
    if date_to:
        raw['to'] = date_to.strip()
    if strategy_value and strategy_value != ALL_STRATEGIES:
        raw['strategy_id'] = strategy_value
    return TradeFilterSchema().load(raw)


def build_journal_view(trades, filters, now=None):
    """
    Derive everything the dashboard shows from the user's trades.

    Summary, monthly PnL and top instruments follow the date range only;
    the trade list also applies status, search and strategy filters.
    """
    date_range = resolve_date_range(
        filters.get('range', 'all'), now, filters.get('date_from'), filters.get('date_to')
    )
    in_range = filter_trades(trades, date_range=date_range)
    visible = filter_trades(
        in_range,
        status=filters.get('status', 'all'),
        search=filters.get('search', ''),
        direction=filters.get('direction'),
        strategy_id=filters.get('strategy_id')
    )
    return {
        'summary': summarize_trades(in_range),
        'by_month': group_trades_by_month(in_range),
        'top_instruments': build_instrument_leaderboard(in_range),
        'trades': sort_trades(visible, filters.get('sort', 'entry-desc')),
        'range': filters.get('range', 'all'),
    }


def format_summary(summary):
    """Stat card texts for a summary dict."""
    return {
        'total': str(summary.get('total', 0)),
        'win_rate': f"{summary.get('win_rate', 0):.1f}%",
        'total_pnl': format_money(summary.get('total_pnl', 0)),
        'avg_r': f"{summary.get('avg_r', 0):.2f}R",
        'open': str(summary.get('open', 0)),
    }


def register_data_callbacks(app):
    """Register all data-related callbacks."""

    @app.callback(
        [
            Output('journal-store', 'data'),
            Output('sign-in-prompt', 'style'),
            Output('journal-content', 'style'),
            Output('user-badge', 'children'),
            Output('last-update-text', 'children'),
            Output('filter-error-text', 'children'),
        ],
        [
            Input('url', 'pathname'),
            Input('refresh-data-btn', 'n_clicks'),
            Input('journal-version', 'data'),
            Input('filter-range', 'value'),
            Input('filter-from', 'value'),
            Input('filter-to', 'value'),
            Input('filter-status', 'value'),
            Input('filter-search', 'value'),
            Input('filter-strategy', 'value'),
        ],
        prevent_initial_call=False
    )
    def load_journal(pathname, n_clicks, version, range_value, date_from, date_to,
                     status, search, strategy_value):
        """Reload the journal for the current user and filters."""
        user = get_current_user()
        if user is None:
            return None, VISIBLE, HIDDEN, "Signed out", "Last updated: --", ""

        filter_error = ""
        try:
            filters = build_filters(range_value, date_from, date_to, status, search, strategy_value)
        except ValidationError as e:
            filter_error = format_validation_error(e)
            filters = build_filters(status=status, search=search, strategy_value=strategy_value)

        trades = TradeService(user.id).get_all_trades()
        view = build_journal_view(trades, filters)

        timestamp = datetime.now().strftime("%H:%M:%S")
        return (
            view,
            HIDDEN,
            VISIBLE,
            user.username or user.email,
            f"Last updated: {timestamp}",
            filter_error,
        )

    @app.callback(
        [
            Output('stat-total-trades', 'children'),
            Output('stat-win-rate', 'children'),
            Output('stat-total-pnl', 'children'),
            Output('stat-total-pnl', 'style'),
            Output('stat-avg-r', 'children'),
            Output('stat-open-positions', 'children'),
        ],
        Input('journal-store', 'data'),
        prevent_initial_call=True
    )
    def update_summary(journal):
        """Update the summary stat cards."""
        if not journal:
            raise PreventUpdate

        summary = journal.get('summary', {})
        texts = format_summary(summary)
        pnl_style = {"color": "#40c057" if summary.get('total_pnl', 0) >= 0 else "#fa5252"}

        return texts['total'], texts['win_rate'], texts['total_pnl'], pnl_style, texts['avg_r'], texts['open']

    @app.callback(
        [
            Output('trade-list-container', 'children'),
            Output('trade-count-badge', 'children'),
            Output('trades-empty-state', 'style'),
            Output('trades-empty-text', 'children'),
        ],
        Input('journal-store', 'data'),
        prevent_initial_call=True
    )
    def update_trade_list(journal):
        """Render the filtered trade cards."""
        if not journal:
            raise PreventUpdate

        trades = journal.get('trades', [])
        count_text = f"{len(trades)} trade{'s' if len(trades) != 1 else ''}"
        if trades:
            return [create_trade_card(t) for t in trades], count_text, HIDDEN, ""

        empty_text = (
            "No trades logged yet." if journal.get('range') == 'all'
            else "No trades match these filters."
        )
        return [], count_text, VISIBLE, empty_text
