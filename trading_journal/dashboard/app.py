"""
Dash Application Setup

Creates and configures the Dash application integrated with Flask.
"""
from dash import Dash, dcc
import dash_mantine_components as dmc

from dashboard.layouts.main_layout import create_main_layout


def create_dash_app(flask_app):
    """
    Create Dash application integrated with Flask server.

    Callbacks run inside the Flask request, so they read the auth cookie
    and call the journal services directly.

    Args:
        flask_app: Flask application instance

    Returns:
        Configured Dash application
    """
    dash_app = Dash(
        __name__,
        server=flask_app,
        url_base_pathname='/dashboard/',
        suppress_callback_exceptions=True,
        external_stylesheets=[
            "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap"
        ]
    )

    dash_app.title = "Trading Journal"

    dash_app.layout = dmc.MantineProvider(
        forceColorScheme="dark",
        theme={
            "fontFamily": "Inter, sans-serif",
            "primaryColor": "blue",
            "components": {
                "Card": {"defaultProps": {"shadow": "sm", "radius": "md"}},
                "Button": {"defaultProps": {"radius": "md"}},
            }
        },
        children=[
            dcc.Location(id='url', refresh=False),
            dcc.Store(id='journal-store', storage_type='memory'),
            dcc.Store(id='strategies-store', storage_type='memory'),
            # Bumped after every write so the journal reloads
            dcc.Store(id='journal-version', storage_type='memory', data=0),
            # Ids the open modals act on; None while creating
            dcc.Store(id='editing-trade-id', storage_type='memory'),
            dcc.Store(id='deleting-trade-id', storage_type='memory'),
            dcc.Store(id='editing-strategy-id', storage_type='memory'),
            dcc.Store(id='archiving-strategy-id', storage_type='memory'),
            dcc.Download(id='csv-download'),
            create_main_layout()
        ]
    )

    register_callbacks(dash_app)

    return dash_app


def register_callbacks(dash_app):
    """Register all Dash callbacks."""
    from dashboard.callbacks.data_callbacks import register_data_callbacks
    from dashboard.callbacks.trade_callbacks import register_trade_callbacks
    from dashboard.callbacks.chart_callbacks import register_chart_callbacks
    from dashboard.callbacks.strategy_callbacks import register_strategy_callbacks
    from dashboard.callbacks.strategy_form_callbacks import register_strategy_form_callbacks

    register_data_callbacks(dash_app)
    register_trade_callbacks(dash_app)
    register_chart_callbacks(dash_app)
    register_strategy_callbacks(dash_app)
    register_strategy_form_callbacks(dash_app)
