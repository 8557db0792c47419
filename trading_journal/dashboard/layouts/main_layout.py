"""
Main Layout Component

Defines the overall structure and layout of the dashboard.
"""
from dash import html
import dash_mantine_components as dmc
from dash_iconify import DashIconify

from dashboard.layouts.components.header import create_header
from dashboard.layouts.components.journal_summary import create_journal_summary
from dashboard.layouts.components.pnl_chart import create_pnl_chart
from dashboard.layouts.components.trade_list import create_trade_list
from dashboard.layouts.components.strategy_leaderboard import (
    create_strategy_leaderboard, create_top_instruments
)
from dashboard.layouts.components.strategy_panel import create_strategy_panel
from dashboard.layouts.components.log_trade_modal import (
    create_log_trade_modal, create_delete_trade_modal
)
from dashboard.layouts.components.strategy_form_modal import (
    create_strategy_form_modal, create_archive_strategy_modal
)


def create_sign_in_prompt():
    """Shown instead of the journal when the request has no valid session."""
    return dmc.Center(
        style={"minHeight": "60vh"},
        children=[
            dmc.Paper(
                p="xl",
                radius="md",
                style={"backgroundColor": "#25262b"},
                children=[
                    dmc.Stack(
                        align="center",
                        gap="sm",
                        children=[
                            DashIconify(icon="mdi:lock-outline", width=48, color="#909296"),
                            dmc.Title("Sign in to view your journal", order=3, c="white"),
                            html.A(dmc.Button("Sign in"), href="/login"),
                        ]
                    )
                ]
            )
        ]
    )


def create_main_layout():
    """
    Create the main dashboard layout.

    Layout structure:
    ┌─────────────────────────────────────────┐
    │            HEADER / NAVBAR              │
    ├─────────────────────────────────────────┤
    │   SUMMARY STAT CARDS (5)                │
    ├───────────────────────┬─────────────────┤
    │   MONTHLY PNL CHART   │ STRATEGY        │
    │   (Bar Chart)         │ LEADERBOARD     │
    ├───────────────────────┼─────────────────┤
    │   TRADE LIST          │ TOP             │
    │   (filters + cards)   │ INSTRUMENTS     │
    ├───────────────────────┴─────────────────┤
    │   STRATEGIES (filters + cards)          │
    └─────────────────────────────────────────┘
    """
    return dmc.Container(
        fluid=True,
        px="md",
        py="sm",
        style={"backgroundColor": "#1a1b1e", "minHeight": "100vh"},
        children=[
            html.Div(id="sign-in-prompt", style={"display": "none"}, children=[create_sign_in_prompt()]),

            html.Div(
                id="journal-content",
                children=[
                    create_header(),

                    dmc.Space(h="md"),

                    create_journal_summary(),

                    dmc.Space(h="md"),

                    dmc.Grid(
                        gutter="md",
                        children=[
                            dmc.GridCol(
                                span={"base": 12, "md": 8},
                                children=[create_pnl_chart()]
                            ),
                            dmc.GridCol(
                                span={"base": 12, "md": 4},
                                children=[create_strategy_leaderboard()]
                            ),
                        ]
                    ),

                    dmc.Space(h="md"),

                    dmc.Grid(
                        gutter="md",
                        children=[
                            dmc.GridCol(
                                span={"base": 12, "md": 8},
                                children=[create_trade_list()]
                            ),
                            dmc.GridCol(
                                span={"base": 12, "md": 4},
                                children=[create_top_instruments()]
                            ),
                        ]
                    ),

                    dmc.Space(h="md"),

                    create_strategy_panel(),

                    create_log_trade_modal(),
                    create_delete_trade_modal(),
                    create_strategy_form_modal(),
                    create_archive_strategy_modal(),
                ]
            ),

            html.Div(id='notifications-container'),
        ]
    )
