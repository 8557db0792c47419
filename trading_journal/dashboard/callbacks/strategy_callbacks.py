"""
Strategy Callbacks

Loads the user's strategies for the select inputs and renders the
strategy list, the leaderboard and the top-instrument panels.
"""
from dash import Output, Input
from dash.exceptions import PreventUpdate
import dash_mantine_components as dmc
from marshmallow import ValidationError

from app.services.auth_service import get_current_user
from app.services.strategy_service import StrategyService
from app.validation.schemas import StrategyFilterSchema, format_validation_error
from dashboard.layouts.components.strategy_leaderboard import (
    create_strategy_row, create_instrument_row
)
from dashboard.layouts.components.strategy_panel import create_strategy_card
from dashboard.layouts.components.trade_list import ALL_STRATEGIES, NO_STRATEGY


def strategy_options(strategies, include_all=True):
    """Select options for the strategy filter / trade form."""
    options = [{"value": ALL_STRATEGIES, "label": "All strategies"}] if include_all else []
    options.append({"value": NO_STRATEGY, "label": "No strategy"})
    for strategy in strategies:
        label = strategy['name']
        if not strategy.get('is_active'):
            label = f"{label} (archived)"
        options.append({"value": str(strategy['id']), "label": label})
    return options


def strategy_count_label(count):
    return f"{count} strategy" if count == 1 else f"{count} strategies"


def _rows_or_placeholder(rows):
    return rows or [dmc.Text("No data yet", size="xs", c="dimmed")]


def register_strategy_callbacks(app):
    """Register all strategy-related callbacks."""

    @app.callback(
        Output('strategies-store', 'data'),
        [
            Input('url', 'pathname'),
            Input('refresh-data-btn', 'n_clicks'),
            Input('journal-version', 'data'),
        ],
        prevent_initial_call=False
    )
    def load_strategies(pathname, n_clicks, version):
        """Load strategies and the leaderboard for the current user."""
        user = get_current_user()
        if user is None:
            return None

        service = StrategyService(user.id)
        return {
            'strategies': service.list_strategies(sort='created-desc'),
            'leaderboard': service.leaderboard(),
        }

    @app.callback(
        [
            Output('filter-strategy', 'data'),
            Output('trade-strategy', 'data'),
            Output('leaderboard-best', 'children'),
            Output('leaderboard-worst', 'children'),
        ],
        Input('strategies-store', 'data'),
        prevent_initial_call=True
    )
    def update_strategy_panels(data):
        """Refresh strategy selects and the leaderboard."""
        if not data:
            raise PreventUpdate

        strategies = data.get('strategies', [])
        active = [s for s in strategies if s.get('is_active')]
        board = data.get('leaderboard', {})

        return (
            strategy_options(strategies),
            strategy_options(active, include_all=False),
            _rows_or_placeholder([create_strategy_row(r) for r in board.get('best', [])]),
            _rows_or_placeholder([create_strategy_row(r) for r in board.get('worst', [])]),
        )

    @app.callback(
        Output('top-instruments-container', 'children'),
        Input('journal-store', 'data'),
        prevent_initial_call=True
    )
    def update_top_instruments(journal):
        """Render the instrument leaderboard for the current date range."""
        if not journal:
            raise PreventUpdate

        return _rows_or_placeholder(
            [create_instrument_row(r) for r in journal.get('top_instruments', [])]
        )

    @app.callback(
        [
            Output('strategy-list-container', 'children'),
            Output('strategy-count-badge', 'children'),
            Output('strategy-filter-error', 'children'),
        ],
        [
            Input('strategies-store', 'data'),
            Input('strategy-filter-status', 'value'),
            Input('strategy-filter-search', 'value'),
            Input('strategy-filter-sort', 'value'),
        ],
        prevent_initial_call=True
    )
    def update_strategy_list(data, status, search, sort):
        """Render the strategy cards for the current status/search/sort."""
        if not data:
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            raise PreventUpdate

        try:
            params = StrategyFilterSchema().load({
                'status': status or 'all',
                'search': search or '',
                'sort': sort or 'performance-desc',
            })
        except ValidationError as e:
            return [], strategy_count_label(0), format_validation_error(e)

        params['include_stats'] = True
        strategies = StrategyService(user.id).list_strategies(**params)
        cards = [create_strategy_card(s) for s in strategies] or [
            dmc.Text("No strategies match.", size="sm", c="dimmed")
        ]
        return cards, strategy_count_label(len(strategies)), ""
