"""
Strategy Form Callbacks

Create, edit, archive and restore strategies from the dashboard, including
the add/remove rows of the technical checklist editor.
"""
import logging
from itertools import zip_longest

from dash import Output, Input, State, no_update, ctx, ALL
from dash.exceptions import PreventUpdate
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from app.api.strategy_routes import DUPLICATE_NAME
from app.database import get_scoped_session
from app.services.auth_service import get_current_user
from app.services.strategy_service import StrategyService
from app.validation.schemas import StrategySchema, format_validation_error
from dashboard.callbacks.trade_callbacks import SESSION_EXPIRED, clicked_index, notice
from dashboard.layouts.components.strategy_form_modal import create_technical_row

logger = logging.getLogger(__name__)

TECHNICAL_STATES = [
    State({'type': 'technical-indicator', 'index': ALL}, 'value'),
    State({'type': 'technical-timeframe', 'index': ALL}, 'value'),
    State({'type': 'technical-condition', 'index': ALL}, 'value'),
    State({'type': 'technical-required', 'index': ALL}, 'checked'),
]


def _text(value):
    return (value or '').strip()


def collect_technicals(indicators, timeframes, conditions, required, keep_blank=False):
    """
    Zip the editor's row values into technical dicts.

    Rows with neither an indicator nor a condition are dropped unless
    keep_blank is set (used when re-rendering the editor).
    """
    rows = []
    for indicator, timeframe, condition, is_required in zip_longest(
        indicators or [], timeframes or [], conditions or [], required or []
    ):
        if not keep_blank and not _text(indicator) and not _text(condition):
            continue
        rows.append({
            'indicator': indicator or '',
            'timeframe': timeframe or None,
            'condition': condition or '',
            'is_required': True if is_required is None else bool(is_required),
        })
    return rows


def build_strategy_payload(name, short_code, setup_description, notes, technicals):
    """Map the form values onto the strategy request shape."""
    return {
        'name': name or '',
        'short_code': short_code or None,
        'setup_description': setup_description or None,
        'notes': notes or None,
        'technicals': technicals,
    }


def technical_rows(technicals):
    """Editor rows for a checklist; one blank row when it is empty."""
    return [create_technical_row(i, t) for i, t in enumerate(technicals or [])] or [
        create_technical_row(0)
    ]


def strategy_form_values(strategy=None):
    """(name, short code, setup, notes, technical rows) for the form."""
    strategy = strategy or {}
    return (
        strategy.get('name') or '',
        strategy.get('short_code') or '',
        strategy.get('setup_description') or '',
        strategy.get('notes') or '',
        technical_rows(strategy.get('technicals')),
    )


def archive_prompt(strategy):
    return (
        f'Archive "{strategy["name"]}"? It stays on its trades and in the filters, '
        f'but can no longer be picked for new trades until restored.'
    )


def register_strategy_form_callbacks(app):
    """Register the strategy create/edit/archive callbacks."""

    @app.callback(
        [
            Output('strategy-form-modal', 'opened', allow_duplicate=True),
            Output('strategy-form-modal', 'title'),
            Output('strategy-form-error', 'children', allow_duplicate=True),
            Output('strategy-form-error', 'hide', allow_duplicate=True),
            Output('editing-strategy-id', 'data'),
            Output('strategy-name', 'value'),
            Output('strategy-short-code', 'value'),
            Output('strategy-setup', 'value'),
            Output('strategy-notes', 'value'),
            Output('technicals-container', 'children', allow_duplicate=True),
        ],
        [
            Input('new-strategy-btn', 'n_clicks'),
            Input({'type': 'edit-strategy-btn', 'index': ALL}, 'n_clicks'),
        ],
        prevent_initial_call=True
    )
    def open_strategy_form(new_clicks, edit_clicks):
        """Open the form blank for a new strategy or filled for an edit."""
        if ctx.triggered_id == 'new-strategy-btn':
            if not new_clicks:
                raise PreventUpdate
            return (True, "New Strategy", "", True, None) + strategy_form_values()

        strategy_id = clicked_index('edit-strategy-btn')
        if strategy_id is None:
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            return (True, "Edit Strategy", SESSION_EXPIRED, False, None) + strategy_form_values()

        strategy = StrategyService(user.id).get_strategy(strategy_id)
        if strategy is None:
            return (True, "Edit Strategy", "Strategy not found", False, None) + strategy_form_values()

        return (True, "Edit Strategy", "", True, strategy.id) + strategy_form_values(strategy.to_dict())

    @app.callback(
        Output('technicals-container', 'children', allow_duplicate=True),
        [
            Input('add-technical-btn', 'n_clicks'),
            Input({'type': 'remove-technical-btn', 'index': ALL}, 'n_clicks'),
        ],
        TECHNICAL_STATES,
        prevent_initial_call=True
    )
    def edit_technical_rows(add_clicks, remove_clicks, indicators, timeframes, conditions, required):
        """Add a blank checklist row or remove the clicked one."""
        rows = collect_technicals(indicators, timeframes, conditions, required, keep_blank=True)

        if ctx.triggered_id == 'add-technical-btn':
            if not add_clicks:
                raise PreventUpdate
            rows.append({})
        else:
            position = clicked_index('remove-technical-btn')
            if position is None or position >= len(rows):
                raise PreventUpdate
            del rows[position]

        # Re-rendered so the row indexes stay equal to positions
        return technical_rows(rows)

    @app.callback(
        [
            Output('strategy-form-modal', 'opened', allow_duplicate=True),
            Output('strategy-form-error', 'children', allow_duplicate=True),
            Output('strategy-form-error', 'hide', allow_duplicate=True),
            Output('journal-version', 'data', allow_duplicate=True),
            Output('notifications-container', 'children', allow_duplicate=True),
        ],
        [
            Input('cancel-strategy-btn', 'n_clicks'),
            Input('save-strategy-btn', 'n_clicks'),
        ],
        [
            State('editing-strategy-id', 'data'),
            State('strategy-name', 'value'),
            State('strategy-short-code', 'value'),
            State('strategy-setup', 'value'),
            State('strategy-notes', 'value'),
        ] + TECHNICAL_STATES + [
            State('journal-version', 'data'),
        ],
        prevent_initial_call=True
    )
    def handle_save_strategy(cancel_clicks, save_clicks, editing_id, name, short_code,
                             setup_description, notes, indicators, timeframes, conditions,
                             required, version):
        """Cancel or submit the strategy form."""
        trigger = ctx.triggered_id
        if trigger == 'cancel-strategy-btn':
            return False, "", True, no_update, no_update
        if trigger != 'save-strategy-btn':
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            return True, SESSION_EXPIRED, False, no_update, no_update

        payload = build_strategy_payload(
            name, short_code, setup_description, notes,
            collect_technicals(indicators, timeframes, conditions, required)
        )

        service = StrategyService(user.id)
        try:
            if editing_id is None:
                strategy = service.create_strategy(StrategySchema().load(payload))
            else:
                strategy = service.update_strategy(
                    editing_id, StrategySchema().load(payload, partial=True)
                )
        except ValidationError as e:
            return True, format_validation_error(e), False, no_update, no_update
        except IntegrityError:
            get_scoped_session().rollback()
            return True, DUPLICATE_NAME, False, no_update, no_update
        except Exception:
            logger.exception('Failed to save strategy from dashboard')
            get_scoped_session().rollback()
            return True, "Unexpected error while saving the strategy", False, no_update, no_update

        if strategy is None:
            return True, "Strategy not found", False, no_update, no_update

        title = "Strategy created" if editing_id is None else "Strategy updated"
        return False, "", True, (version or 0) + 1, notice(title, f"{strategy.name} saved")

    @app.callback(
        [
            Output('archive-strategy-modal', 'opened', allow_duplicate=True),
            Output('archive-strategy-text', 'children'),
            Output('archive-reason', 'value'),
            Output('archiving-strategy-id', 'data'),
            Output('journal-version', 'data', allow_duplicate=True),
            Output('notifications-container', 'children', allow_duplicate=True),
        ],
        Input({'type': 'toggle-strategy-btn', 'index': ALL}, 'n_clicks'),
        State('journal-version', 'data'),
        prevent_initial_call=True
    )
    def toggle_strategy(n_clicks, version):
        """Ask for a reason before archiving; restore archived strategies directly."""
        strategy_id = clicked_index('toggle-strategy-btn')
        if strategy_id is None:
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            raise PreventUpdate

        service = StrategyService(user.id)
        strategy = service.get_strategy(strategy_id)
        if strategy is None:
            raise PreventUpdate

        if strategy.is_active:
            return True, archive_prompt(strategy.to_dict()), "", strategy.id, no_update, no_update

        try:
            service.update_strategy(strategy.id, {'is_active': True})
        except Exception:
            logger.exception(f'Failed to restore strategy {strategy_id} from dashboard')
            get_scoped_session().rollback()
            return no_update, no_update, no_update, no_update, no_update, notice(
                "Restore failed", "Unexpected error while restoring the strategy", "red", "mdi:alert"
            )

        return (no_update, no_update, no_update, None, (version or 0) + 1,
                notice("Strategy restored", f"{strategy.name} is active again"))

    @app.callback(
        [
            Output('archive-strategy-modal', 'opened', allow_duplicate=True),
            Output('journal-version', 'data', allow_duplicate=True),
            Output('notifications-container', 'children', allow_duplicate=True),
        ],
        [
            Input('cancel-archive-btn', 'n_clicks'),
            Input('confirm-archive-btn', 'n_clicks'),
        ],
        [
            State('archiving-strategy-id', 'data'),
            State('archive-reason', 'value'),
            State('journal-version', 'data'),
        ],
        prevent_initial_call=True
    )
    def handle_archive_strategy(cancel_clicks, confirm_clicks, strategy_id, reason, version):
        """Archive the confirmed strategy or close the dialog."""
        if ctx.triggered_id == 'cancel-archive-btn':
            return False, no_update, no_update
        if ctx.triggered_id != 'confirm-archive-btn' or strategy_id is None:
            raise PreventUpdate

        user = get_current_user()
        if user is None:
            return False, no_update, notice("Not signed in", SESSION_EXPIRED, "red", "mdi:alert")

        try:
            data = StrategySchema().load(
                {'is_active': False, 'archived_reason': reason}, partial=True
            )
            strategy = StrategyService(user.id).update_strategy(strategy_id, data)
        except ValidationError as e:
            return True, no_update, notice(
                "Could not archive", format_validation_error(e), "red", "mdi:alert"
            )
        except Exception:
            logger.exception(f'Failed to archive strategy {strategy_id} from dashboard')
            get_scoped_session().rollback()
            return False, no_update, notice(
                "Archive failed", "Unexpected error while archiving the strategy", "red", "mdi:alert"
            )

        if strategy is None:
            return False, (version or 0) + 1, notice(
                "Strategy not found", "It may have been deleted", "yellow", "mdi:alert"
            )

        return False, (version or 0) + 1, notice("Strategy archived", f"{strategy.name} archived")
