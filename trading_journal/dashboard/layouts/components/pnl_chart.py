"""
PnL Chart Component

Bar chart of realized PnL per month.
"""
from dash import dcc
import dash_mantine_components as dmc


def create_pnl_chart():
    """Create the monthly PnL chart component."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#1e1f23", "height": "100%"},
        children=[
            dmc.Group(
                justify="space-between",
                mb="md",
                children=[
                    dmc.Title("Monthly PnL", order=4, c="white"),
                    dmc.Text(id="chart-period-total", size="sm", fw=600, children="$0.00"),
                ]
            ),

            dcc.Graph(
                id="pnl-chart",
                config={
                    "displayModeBar": False,
                    "responsive": True
                },
                style={"height": "300px"}
            ),
        ]
    )
