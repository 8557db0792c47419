"""
Strategy Leaderboard Component

Best and worst active strategies, plus the top instruments by PnL.
"""
import dash_mantine_components as dmc
from dash_iconify import DashIconify

from dashboard.layouts.components.trade_list import format_money, pnl_color


def create_leaderboard_row(name, total_pnl, detail):
    """One ranked row (used by callback)."""
    return dmc.Group(
        justify="space-between",
        children=[
            dmc.Stack(
                gap=0,
                children=[
                    dmc.Text(name, fw=500, c="white", size="sm"),
                    dmc.Text(detail, size="xs", c="dimmed"),
                ]
            ),
            dmc.Text(format_money(total_pnl), fw=600, size="sm", c=pnl_color(total_pnl)),
        ]
    )


def create_strategy_row(row):
    stats = row.get('stats') or {}
    detail = f"{stats.get('closed', 0)} closed · {stats.get('win_rate', 0):.0f}% win"
    return create_leaderboard_row(row.get('name', ''), stats.get('total_pnl', 0), detail)


def create_instrument_row(row):
    detail = f"{row.get('trades', 0)} trades · {row.get('win_rate', 0):.0f}% win"
    return create_leaderboard_row(row.get('instrument', ''), row.get('total_pnl', 0), detail)


def _section(title, icon, color, container_id):
    return dmc.Stack(
        gap="xs",
        children=[
            dmc.Group(
                gap="xs",
                children=[
                    DashIconify(icon=icon, width=18, color=color),
                    dmc.Text(title, size="sm", fw=600, c="white"),
                ]
            ),
            dmc.Stack(id=container_id, gap="xs", children=[
                dmc.Text("No data yet", size="xs", c="dimmed")
            ]),
        ]
    )


def create_strategy_leaderboard():
    """Create the best/worst strategy panel."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#1e1f23", "height": "100%"},
        children=[
            dmc.Title("Strategy Leaderboard", order=4, c="white", mb="md"),
            dmc.Stack(
                gap="md",
                children=[
                    _section("Best", "mdi:trophy-outline", "#40c057", "leaderboard-best"),
                    dmc.Divider(),
                    _section("Worst", "mdi:alert-outline", "#fa5252", "leaderboard-worst"),
                ]
            ),
        ]
    )


def create_top_instruments():
    """Create the top-instrument panel."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#1e1f23", "height": "100%"},
        children=[
            dmc.Title("Top Instruments", order=4, c="white", mb="md"),
            dmc.Stack(id="top-instruments-container", gap="xs", children=[
                dmc.Text("No data yet", size="xs", c="dimmed")
            ]),
        ]
    )
