"""
Trade Callbacks

Handles the log/edit trade modal, trade deletion and CSV export.
"""
import logging
from datetime import datetime, timezone

from dash import Output, Input, State, no_update, ctx, dcc, ALL
from dash.exceptions import PreventUpdate
import dash_mantine_components as dmc
from dash_iconify import DashIconify
from marshmallow import ValidationError

from app.services.auth_service import get_current_user
from app.services.csv_export import trades_to_csv
from app.services.trade_service import TradeService, StrategyNotFoundError
from app.validation.schemas import TradeSchema, format_validation_error
from dashboard.layouts.components.trade_list import NO_STRATEGY, format_datetime

logger = logging.getLogger(__name__)

SESSION_EXPIRED = "Your session has expired. Sign in again."

# Order matches the form states below and build_trade_payload()
TRADE_FORM_FIELDS = [
    ('trade-instrument', 'value'),
    ('trade-direction', 'value'),
    ('trade-entry-datetime', 'value'),
    ('trade-exit-datetime', 'value'),
    ('trade-entry-price', 'value'),
    ('trade-exit-price', 'value'),
    ('trade-position-size', 'value'),
    ('trade-realized-pnl', 'value'),
    ('trade-r-multiple', 'value'),
    ('trade-platform', 'value'),
    ('trade-strategy', 'value'),
]


def build_trade_payload(instrument, direction, entry_datetime, exit_datetime, entry_price,
                        exit_price, position_size, realized_pnl, r_multiple, platform,
                        strategy_value):
    """Map the modal's form values onto the trade request shape."""
    return {
        'instrument': instrument or '',
        'direction': direction or 'long',
        'entry_datetime': entry_datetime or '',
        'exit_datetime': exit_datetime or None,
        'entry_price': entry_price,
        'exit_price': exit_price,
        'position_size': position_size,
        'realized_pnl': realized_pnl,
        'r_multiple': r_multiple,
        'platform': platform or None,
        'strategy_id': None if strategy_value in (None, '', NO_STRATEGY) else strategy_value,
    }


def _blank(value):
    return '' if value is None else value


def trade_form_values(trade=None):
    """
    Form values for a trade dict, in TRADE_FORM_FIELDS order.

    With no trade the form is reset for a new entry.
    """
    trade = trade or {}
    strategy_id = trade.get('strategy_id')
    return (
        trade.get('instrument') or '',
        trade.get('direction') or 'long',
        trade.get('entry_datetime') or '',
        trade.get('exit_datetime') or '',
        _blank(trade.get('entry_price')),
        _blank(trade.get('exit_price')),
        _blank(trade.get('position_size')),
        _blank(trade.get('realized_pnl')),
        _blank(trade.get('r_multiple')),
        trade.get('platform') or '',
        NO_STRATEGY if strategy_id is None else str(strategy_id),
    )


def delete_prompt(trade):
    return (
        f"Delete the {trade['direction'].upper()} {trade['instrument']} trade entered "
        f"{format_datetime(trade['entry_datetime'])}? This cannot be undone."
    )


def export_filename(now=None):
    now = now or datetime.now(timezone.utc)
    return f"trades-{now.strftime('%Y-%m-%d')}.csv"


def clicked_index(kind):
    """
    Index of the pattern-matched button that fired the callback.

    None when the trigger is another component, or when the callback fired
    because matching buttons were re-rendered rather than clicked.
    """
    triggered = ctx.triggered_id
    if not isinstance(triggered, dict) or triggered.get('type') != kind:
        return None
    if not ctx.triggered or not ctx.triggered[0].get('value'):
        return None
    return triggered.get('index')


def notice(title, message, color="green", icon="mdi:check"):
    return dmc.Alert(
        message,
        title=title,
        color=color,
        icon=DashIconify(icon=icon),
        withCloseButton=True,
        duration=4000,
    )


def register_trade_callbacks(app):
    """Register all trade-related callbacks."""

    @app.callback(
        [
            Output('log-trade-modal', 'opened', allow_duplicate=True),
            Output('log-trade-modal', 'title'),
            Output('log-trade-error', 'children', allow_duplicate=True),
            Output('log-trade-error', 'hide', allow_duplicate=True),
            Output('editing-trade-id', 'data'),
        ] + [Output(component, prop) for component, prop in TRADE_FORM_FIELDS],
        [
            Input('log-trade-btn', 'n_clicks'),
            Input({'type': 'edit-trade-btn', 'index': ALL}, 'n_clicks'),
        ],
        prevent_initial_call=True
    )
    def open_trade_form(log_clicks, edit_clicks):
        """Open the form blank for a new trade or filled for an edit."""
        if ctx.triggered_id == 'log-trade-btn':
            if not log_clicks:
                raise PreventUpdate
            return (True, "Log Trade", "", True, None) + trade_form_values()

        trade_id = clicked_index('edit-trade-btn')
        if trade_id is None:
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            return (True, "Edit Trade", SESSION_EXPIRED, False, None) + trade_form_values()

        trade = TradeService(user.id).get_trade(trade_id)
        if trade is None:
            return (True, "Edit Trade", "Trade not found", False, None) + trade_form_values()

        return (True, "Edit Trade", "", True, trade.id) + trade_form_values(trade.to_dict())

    @app.callback(
        [
            Output('log-trade-modal', 'opened', allow_duplicate=True),
            Output('log-trade-error', 'children', allow_duplicate=True),
            Output('log-trade-error', 'hide', allow_duplicate=True),
            Output('journal-version', 'data', allow_duplicate=True),
            Output('notifications-container', 'children', allow_duplicate=True),
        ],
        [
            Input('cancel-trade-btn', 'n_clicks'),
            Input('save-trade-btn', 'n_clicks'),
        ],
        [State(component, prop) for component, prop in TRADE_FORM_FIELDS] + [
            State('editing-trade-id', 'data'),
            State('journal-version', 'data'),
        ],
        prevent_initial_call=True
    )
    def handle_log_trade(cancel_clicks, save_clicks, instrument, direction, entry_datetime,
                         exit_datetime, entry_price, exit_price, position_size, realized_pnl,
                         r_multiple, platform, strategy_value, editing_id, version):
        """Cancel or submit the trade form."""
        trigger = ctx.triggered_id
        if trigger == 'cancel-trade-btn':
            return False, "", True, no_update, no_update
        if trigger != 'save-trade-btn':
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            return True, SESSION_EXPIRED, False, no_update, no_update

        payload = build_trade_payload(
            instrument, direction, entry_datetime, exit_datetime, entry_price, exit_price,
            position_size, realized_pnl, r_multiple, platform, strategy_value
        )

        service = TradeService(user.id)
        try:
            data = TradeSchema().load(payload)
            if editing_id is None:
                trade = service.create_trade(data)
            else:
                trade = service.update_trade(editing_id, data)
        except ValidationError as e:
            return True, format_validation_error(e), False, no_update, no_update
        except StrategyNotFoundError as e:
            return True, str(e), False, no_update, no_update
        except Exception:
            logger.exception('Failed to save trade from dashboard')
            return True, "Unexpected error while saving the trade", False, no_update, no_update

        if trade is None:
            return True, "Trade not found", False, no_update, no_update

        title = "Trade logged" if editing_id is None else "Trade updated"
        message = f"{trade.direction.upper()} {trade.instrument} saved"
        return False, "", True, (version or 0) + 1, notice(title, message)

    @app.callback(
        [
            Output('delete-trade-modal', 'opened', allow_duplicate=True),
            Output('delete-trade-text', 'children'),
            Output('deleting-trade-id', 'data'),
        ],
        Input({'type': 'delete-trade-btn', 'index': ALL}, 'n_clicks'),
        prevent_initial_call=True
    )
    def confirm_delete_trade(n_clicks):
        """Ask before deleting the clicked trade."""
        trade_id = clicked_index('delete-trade-btn')
        if trade_id is None:
            raise PreventUpdate

        user = get_current_user()
        trade = TradeService(user.id).get_trade(trade_id) if user else None
        if trade is None:
            raise PreventUpdate

        return True, delete_prompt(trade.to_dict()), trade.id

    @app.callback(
        [
            Output('delete-trade-modal', 'opened', allow_duplicate=True),
            Output('journal-version', 'data', allow_duplicate=True),
            Output('notifications-container', 'children', allow_duplicate=True),
        ],
        [
            Input('cancel-delete-trade-btn', 'n_clicks'),
            Input('confirm-delete-trade-btn', 'n_clicks'),
        ],
        [
            State('deleting-trade-id', 'data'),
            State('journal-version', 'data'),
        ],
        prevent_initial_call=True
    )
    def handle_delete_trade(cancel_clicks, confirm_clicks, trade_id, version):
        """Delete the confirmed trade or close the dialog."""
        if ctx.triggered_id == 'cancel-delete-trade-btn':
            return False, no_update, no_update
        if ctx.triggered_id != 'confirm-delete-trade-btn' or trade_id is None:
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            return False, no_update, notice("Not signed in", SESSION_EXPIRED, "red", "mdi:alert")

        try:
            deleted = TradeService(user.id).delete_trade(trade_id)
        except Exception:
            logger.exception(f'Failed to delete trade {trade_id} from dashboard')
            return False, no_update, notice(
                "Delete failed", "Unexpected error while deleting the trade", "red", "mdi:alert"
            )

        if not deleted:
            return False, (version or 0) + 1, notice(
                "Trade not found", "It may already have been deleted", "yellow", "mdi:alert"
            )

        return False, (version or 0) + 1, notice("Trade deleted", "The trade was removed")

    @app.callback(
        Output('csv-download', 'data'),
        Input('export-csv-btn', 'n_clicks'),
        State('journal-store', 'data'),
        prevent_initial_call=True
    )
    def export_csv(n_clicks, journal):
        """Download the currently listed trades as CSV."""
        if not n_clicks or not journal:
            raise PreventUpdate

        return dcc.send_string(trades_to_csv(journal.get('trades', [])), export_filename())
