"""
Strategy Panel Component

The user's strategies with their technical checklists and stats, plus the
controls to create, edit, archive and restore them.
"""
import dash_mantine_components as dmc
from dash_iconify import DashIconify

from dashboard.layouts.components.trade_list import format_money, pnl_color

STRATEGY_SORT_OPTIONS = [
    {"value": "performance-desc", "label": "Best performing"},
    {"value": "performance-asc", "label": "Worst performing"},
    {"value": "created-desc", "label": "Newest first"},
    {"value": "created-asc", "label": "Oldest first"},
]


def format_technical(technical):
    """'RSI (H4): Above 50' / 'Volume: Rising'."""
    label = technical.get('indicator', '')
    if technical.get('timeframe'):
        label = f"{label} ({technical['timeframe']})"
    return f"{label}: {technical.get('condition', '')}"


def create_technical_item(technical):
    required = technical.get('is_required', True)
    return dmc.Group(
        gap=6,
        children=[
            DashIconify(
                icon="mdi:checkbox-marked-circle-outline" if required else "mdi:circle-outline",
                width=14,
                color="#4dabf7" if required else "#909296"
            ),
            dmc.Text(format_technical(technical), size="xs", c="white" if required else "dimmed"),
        ]
    )


def create_strategy_card(strategy):
    """Create a single strategy card (used by callback)."""
    is_active = strategy.get('is_active', True)
    stats = strategy.get('stats') or {}
    technicals = strategy.get('technicals') or []
    total_pnl = stats.get('total_pnl', 0)

    badges = []
    if strategy.get('short_code'):
        badges.append(dmc.Badge(strategy['short_code'], color="blue", variant="light", size="xs"))
    if not is_active:
        badges.append(dmc.Badge("ARCHIVED", color="gray", variant="filled", size="xs"))

    details = []
    if strategy.get('setup_description'):
        details.append(dmc.Text(strategy['setup_description'], size="xs", c="dimmed"))
    if not is_active and strategy.get('archived_reason'):
        details.append(dmc.Text(f"Archived: {strategy['archived_reason']}", size="xs", c="dimmed", fs="italic"))

    return dmc.Card(
        withBorder=True,
        p="sm",
        style={"backgroundColor": "#25262b", "opacity": 1 if is_active else 0.7},
        children=[
            dmc.Group(
                justify="space-between",
                align="flex-start",
                children=[
                    dmc.Stack(
                        gap=4,
                        children=[
                            dmc.Group(
                                gap="xs",
                                children=[dmc.Text(strategy.get('name', ''), fw=600, c="white")] + badges
                            ),
                            *details,
                        ]
                    ),
                    dmc.Stack(
                        gap=0,
                        align="flex-end",
                        children=[
                            dmc.Text(format_money(total_pnl), fw=700, c=pnl_color(total_pnl)),
                            dmc.Text(
                                f"{stats.get('closed', 0)} closed · {stats.get('win_rate', 0):.0f}% win",
                                size="xs",
                                c="dimmed"
                            ),
                        ]
                    ),
                ]
            ),

            dmc.Stack(
                gap=2,
                mt="xs",
                children=[create_technical_item(t) for t in technicals] or [
                    dmc.Text("No technical conditions", size="xs", c="dimmed")
                ]
            ),

            dmc.Group(
                justify="flex-end",
                gap="xs",
                mt="xs",
                children=[
                    dmc.Button(
                        "Edit",
                        id={"type": "edit-strategy-btn", "index": strategy['id']},
                        variant="subtle",
                        size="compact-xs",
                        leftSection=DashIconify(icon="mdi:pencil-outline", width=14)
                    ),
                    dmc.Button(
                        "Archive" if is_active else "Restore",
                        id={"type": "toggle-strategy-btn", "index": strategy['id']},
                        variant="subtle",
                        color="gray" if is_active else "green",
                        size="compact-xs",
                        leftSection=DashIconify(
                            icon="mdi:archive-outline" if is_active else "mdi:archive-arrow-up-outline",
                            width=14
                        )
                    ),
                ]
            ),
        ]
    )


def create_strategy_filters():
    """Status, search and sort controls above the strategy list."""
    return dmc.Group(
        gap="sm",
        align="flex-end",
        children=[
            dmc.SegmentedControl(
                id="strategy-filter-status",
                value="all",
                data=[
                    {"value": "all", "label": "All"},
                    {"value": "active", "label": "Active"},
                    {"value": "archived", "label": "Archived"},
                ],
                size="xs",
                color="blue"
            ),
            dmc.TextInput(
                id="strategy-filter-search",
                label="Search",
                placeholder="Strategy name",
                leftSection=DashIconify(icon="mdi:magnify"),
                size="xs",
                w=200,
                debounce=300
            ),
            dmc.Select(
                id="strategy-filter-sort",
                label="Sort",
                value="performance-desc",
                data=STRATEGY_SORT_OPTIONS,
                size="xs",
                w=170
            ),
        ]
    )


def create_strategy_panel():
    """Create the strategy management panel."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#1e1f23"},
        children=[
            dmc.Group(
                justify="space-between",
                mb="md",
                children=[
                    dmc.Group(
                        gap="xs",
                        children=[
                            dmc.Title("Strategies", order=4, c="white"),
                            dmc.Badge(id="strategy-count-badge", children="0 strategies",
                                      color="gray", variant="light"),
                        ]
                    ),
                    dmc.Button(
                        "New strategy",
                        id="new-strategy-btn",
                        size="xs",
                        leftSection=DashIconify(icon="mdi:plus")
                    ),
                ]
            ),

            create_strategy_filters(),

            dmc.Text(id="strategy-filter-error", size="xs", c="red", mt="xs", children=""),

            dmc.Space(h="sm"),

            dmc.ScrollArea(
                h=420,
                children=[
                    dmc.Stack(id="strategy-list-container", gap="sm", children=[]),
                ]
            ),
        ]
    )
