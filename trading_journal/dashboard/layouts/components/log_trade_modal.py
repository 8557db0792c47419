"""
Log Trade Modal

Form for journaling a new trade or editing a stored one, plus the delete
confirmation. Validation errors are shown inline.
"""
import dash_mantine_components as dmc
from dash_iconify import DashIconify

from dashboard.layouts.components.trade_list import NO_STRATEGY


def create_log_trade_modal():
    """Create the log-trade modal."""
    return dmc.Modal(
        id="log-trade-modal",
        title="Log Trade",
        size="lg",
        centered=True,
        opened=False,
        overlayProps={"blur": 3},
        children=[
            dmc.Stack(
                gap="sm",
                children=[
                    dmc.Group(
                        grow=True,
                        children=[
                            dmc.TextInput(id="trade-instrument", label="Instrument",
                                          placeholder="BTCUSDT", required=True),
                            dmc.SegmentedControl(
                                id="trade-direction",
                                value="long",
                                data=[
                                    {"value": "long", "label": "Long"},
                                    {"value": "short", "label": "Short"},
                                ],
                                color="blue"
                            ),
                        ]
                    ),
                    dmc.Group(
                        grow=True,
                        children=[
                            dmc.TextInput(id="trade-entry-datetime", label="Entry (UTC)",
                                          placeholder="2024-10-02T09:30", required=True),
                            dmc.TextInput(id="trade-exit-datetime", label="Exit (UTC)",
                                          placeholder="Leave empty while open"),
                        ]
                    ),
                    dmc.Group(
                        grow=True,
                        children=[
                            dmc.NumberInput(id="trade-entry-price", label="Entry price", required=True),
                            dmc.NumberInput(id="trade-exit-price", label="Exit price"),
                            dmc.NumberInput(id="trade-position-size", label="Position size", required=True),
                        ]
                    ),
                    dmc.Group(
                        grow=True,
                        children=[
                            dmc.NumberInput(id="trade-realized-pnl", label="Realized PnL"),
                            dmc.NumberInput(id="trade-r-multiple", label="R multiple", decimalScale=2),
                        ]
                    ),
                    dmc.Group(
                        grow=True,
                        children=[
                            dmc.TextInput(id="trade-platform", label="Platform", placeholder="Binance"),
                            dmc.Select(
                                id="trade-strategy",
                                label="Strategy",
                                value=NO_STRATEGY,
                                data=[{"value": NO_STRATEGY, "label": "No strategy"}]
                            ),
                        ]
                    ),

                    dmc.Alert(
                        id="log-trade-error",
                        title="Could not save trade",
                        color="red",
                        icon=DashIconify(icon="mdi:alert"),
                        hide=True,
                        children=""
                    ),

                    dmc.Group(
                        justify="flex-end",
                        children=[
                            dmc.Button("Cancel", id="cancel-trade-btn", variant="subtle", color="gray"),
                            dmc.Button("Save trade", id="save-trade-btn",
                                       leftSection=DashIconify(icon="mdi:content-save")),
                        ]
                    ),
                ]
            )
        ]
    )


def create_delete_trade_modal():
    """Confirmation dialog shown before a trade is deleted."""
    return dmc.Modal(
        id="delete-trade-modal",
        title="Delete Trade",
        size="sm",
        centered=True,
        opened=False,
        overlayProps={"blur": 3},
        children=[
            dmc.Stack(
                gap="md",
                children=[
                    dmc.Text(id="delete-trade-text", size="sm", children=""),
                    dmc.Group(
                        justify="flex-end",
                        children=[
                            dmc.Button("Cancel", id="cancel-delete-trade-btn", variant="subtle", color="gray"),
                            dmc.Button("Delete", id="confirm-delete-trade-btn", color="red",
                                       leftSection=DashIconify(icon="mdi:trash-can-outline")),
                        ]
                    ),
                ]
            )
        ]
    )
