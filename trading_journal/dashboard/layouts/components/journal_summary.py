"""
Journal Summary Component

Key journal metrics in stat cards.
"""
import dash_mantine_components as dmc
from dash_iconify import DashIconify


def create_stat_card(title, value_id, icon, color="blue", initial="0"):
    """Create a single stat card."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#25262b"},
        children=[
            dmc.Group(
                justify="space-between",
                children=[
                    dmc.Stack(
                        gap="xs",
                        children=[
                            dmc.Text(title, size="sm", c="dimmed"),
                            dmc.Text(
                                id=value_id,
                                size="xl",
                                fw=700,
                                children=initial
                            ),
                        ]
                    ),
                    dmc.ThemeIcon(
                        DashIconify(icon=icon, width=24),
                        size="xl",
                        radius="md",
                        color=color,
                        variant="light"
                    ),
                ]
            )
        ]
    )


def create_journal_summary():
    """Create the summary row with five stat cards."""
    cards = [
        ("Total Trades", "stat-total-trades", "mdi:format-list-numbered", "blue", "0"),
        ("Win Rate", "stat-win-rate", "mdi:target", "green", "0.0%"),
        ("Total PnL", "stat-total-pnl", "mdi:cash-multiple", "cyan", "$0.00"),
        ("Average R", "stat-avg-r", "mdi:scale-balance", "violet", "0.00R"),
        ("Open Positions", "stat-open-positions", "mdi:clock-outline", "orange", "0"),
    ]
    return dmc.SimpleGrid(
        cols={"base": 1, "sm": 2, "lg": 5},
        spacing="md",
        children=[create_stat_card(*card) for card in cards]
    )
