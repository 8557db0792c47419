"""
Trade List Component

Journal trades with date, status, search and strategy filters.
"""
from dash import html
import dash_mantine_components as dmc
from dash_iconify import DashIconify

RANGE_OPTIONS = [
    {"value": "all", "label": "All time"},
    {"value": "today", "label": "Today"},
    {"value": "this-week", "label": "This week"},
    {"value": "this-month", "label": "This month"},
    {"value": "this-year", "label": "This year"},
    {"value": "last-week", "label": "Last week"},
    {"value": "last-month", "label": "Last month"},
    {"value": "last-year", "label": "Last year"},
    {"value": "last-7", "label": "Last 7 days"},
    {"value": "last-30", "label": "Last 30 days"},
    {"value": "custom", "label": "Custom range"},
]

# Select values must be strings
ALL_STRATEGIES = "all"
NO_STRATEGY = "none"


def format_money(value):
    """'$1,425.00' / '-$1,100.00'; '--' when missing."""
    if value is None:
        return "--"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_r(value):
    if value is None:
        return "--"
    return f"{value:+.2f}R"


def format_datetime(value):
    """ISO string -> 'YYYY-MM-DD HH:MM'."""
    return value[:16].replace('T', ' ') if value else ''


def pnl_color(value):
    if value is None:
        return "dimmed"
    return "green" if value >= 0 else "red"


def create_trade_actions(trade_id):
    """Edit and delete buttons for a stored trade."""
    if trade_id is None:
        return []
    return [
        dmc.ActionIcon(
            DashIconify(icon="mdi:pencil-outline", width=16),
            id={"type": "edit-trade-btn", "index": trade_id},
            variant="subtle",
            color="gray",
            size="sm"
        ),
        dmc.ActionIcon(
            DashIconify(icon="mdi:trash-can-outline", width=16),
            id={"type": "delete-trade-btn", "index": trade_id},
            variant="subtle",
            color="red",
            size="sm"
        ),
    ]


def create_trade_card(trade):
    """Create a single trade card (used by callback)."""
    is_long = trade.get('direction') == 'long'
    is_open = trade.get('is_open', not trade.get('exit_datetime'))
    pnl = trade.get('realized_pnl')

    return dmc.Card(
        p="sm",
        radius="md",
        withBorder=True,
        style={"backgroundColor": "#25262b", "borderColor": "#373a40"},
        children=[
            dmc.Group(
                justify="space-between",
                children=[
                    dmc.Group(
                        gap="sm",
                        children=[
                            dmc.Badge(
                                (trade.get('direction') or '').upper(),
                                color="green" if is_long else "red",
                                variant="filled",
                                size="sm"
                            ),
                            dmc.Stack(
                                gap=0,
                                children=[
                                    dmc.Text(trade.get('instrument', ''), fw=600, c="white"),
                                    dmc.Text(trade.get('platform') or '', size="xs", c="dimmed"),
                                ]
                            ),
                        ]
                    ),
                    dmc.Stack(
                        gap=0,
                        align="flex-end",
                        children=[
                            dmc.Text(
                                "OPEN" if is_open else format_money(pnl),
                                fw=600,
                                c="yellow" if is_open else pnl_color(pnl)
                            ),
                            dmc.Text(
                                f"{trade.get('position_size', 0):g} @ {trade.get('entry_price', 0):,.2f}"
                                + (f" → {trade['exit_price']:,.2f}" if trade.get('exit_price') is not None else ""),
                                size="xs",
                                c="dimmed"
                            ),
                        ]
                    ),
                ]
            ),
            dmc.Group(
                justify="space-between",
                mt="xs",
                children=[
                    dmc.Text(
                        format_datetime(trade.get('entry_datetime'))
                        + (f" → {format_datetime(trade.get('exit_datetime'))}" if trade.get('exit_datetime') else ""),
                        size="xs",
                        c="dimmed"
                    ),
                    dmc.Group(
                        gap="xs",
                        children=[
                            dmc.Badge(
                                trade.get('strategy_name') or 'No strategy',
                                color="gray",
                                variant="light",
                                size="xs"
                            ),
                            dmc.Text(format_r(trade.get('r_multiple')), size="xs", c="dimmed"),
                            *create_trade_actions(trade.get('id')),
                        ]
                    ),
                ]
            ),
        ]
    )


def create_trade_filters():
    """Filter controls above the trade list."""
    return dmc.Group(
        gap="sm",
        align="flex-end",
        children=[
            dmc.Select(
                id="filter-range",
                label="Date range",
                value="all",
                data=RANGE_OPTIONS,
                size="xs",
                w=150
            ),
            dmc.TextInput(id="filter-from", label="From", placeholder="YYYY-MM-DD", size="xs", w=120),
            dmc.TextInput(id="filter-to", label="To", placeholder="YYYY-MM-DD", size="xs", w=120),
            dmc.SegmentedControl(
                id="filter-status",
                value="all",
                data=[
                    {"value": "all", "label": "All"},
                    {"value": "open", "label": "Open"},
                    {"value": "closed", "label": "Closed"},
                ],
                size="xs",
                color="blue"
            ),
            dmc.Select(
                id="filter-strategy",
                label="Strategy",
                value=ALL_STRATEGIES,
                data=[{"value": ALL_STRATEGIES, "label": "All strategies"}],
                size="xs",
                w=200
            ),
            dmc.TextInput(
                id="filter-search",
                label="Search",
                placeholder="Instrument or strategy",
                leftSection=DashIconify(icon="mdi:magnify"),
                size="xs",
                w=200,
                debounce=300
            ),
        ]
    )


def create_trade_list():
    """Create the trade list component."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#1e1f23"},
        children=[
            dmc.Group(
                justify="space-between",
                mb="md",
                children=[
                    dmc.Title("Trades", order=4, c="white"),
                    dmc.Badge(
                        id="trade-count-badge",
                        children="0 trades",
                        color="gray",
                        variant="light"
                    ),
                ]
            ),

            create_trade_filters(),

            dmc.Text(id="filter-error-text", size="xs", c="red", mt="xs", children=""),

            dmc.Space(h="sm"),

            dmc.ScrollArea(
                h=420,
                children=[
                    dmc.Stack(
                        id="trade-list-container",
                        gap="sm",
                        children=[]
                    ),

                    html.Div(
                        id="trades-empty-state",
                        children=[
                            dmc.Stack(
                                align="center",
                                py="xl",
                                children=[
                                    DashIconify(icon="mdi:history", width=48, color="#909296"),
                                    dmc.Text(id="trades-empty-text", c="dimmed", size="lg",
                                             children="No trades logged yet."),
                                ]
                            )
                        ]
                    ),
                ]
            ),
        ]
    )
