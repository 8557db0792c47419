"""
Chart Callbacks

Handles the monthly PnL bar chart.
"""
from dash import Output, Input
from dash.exceptions import PreventUpdate
import plotly.graph_objects as go

from dashboard.layouts.components.trade_list import format_money

# Dark theme colors
COLORS = {
    'background': '#1e1f23',
    'paper': '#25262b',
    'text': '#c1c2c5',
    'grid': '#373a40',
    'line': '#228be6',
    'positive': '#40c057',
    'negative': '#fa5252',
}


def create_monthly_pnl_figure(by_month):
    """
    Bar chart of PnL per month.

    Args:
        by_month: Output of group_trades_by_month()

    Returns:
        plotly Figure
    """
    labels = [row['label'] for row in by_month]
    values = [row['pnl'] for row in by_month]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=labels,
        y=values,
        marker=dict(color=[COLORS['positive'] if v >= 0 else COLORS['negative'] for v in values]),
        hovertemplate='%{x}<br>$%{y:,.2f}<extra></extra>'
    ))

    fig.update_layout(
        plot_bgcolor=COLORS['background'],
        paper_bgcolor=COLORS['background'],
        font=dict(color=COLORS['text']),
        margin=dict(l=0, r=0, t=10, b=0),
        xaxis=dict(
            showgrid=False,
            showline=False,
            type='category',
            tickfont=dict(size=10),
        ),
        yaxis=dict(
            showgrid=True,
            gridcolor=COLORS['grid'],
            zerolinecolor=COLORS['grid'],
            showline=False,
            tickformat='$,.0f',
            tickfont=dict(size=10),
        ),
        showlegend=False,
    )

    if not by_month:
        fig.add_annotation(
            text="No closed trades in this range",
            x=0.5,
            y=0.5,
            xref='paper',
            yref='paper',
            font=dict(size=14, color=COLORS['text']),
            showarrow=False
        )

    return fig


def register_chart_callbacks(app):
    """Register all chart-related callbacks."""

    @app.callback(
        [
            Output('pnl-chart', 'figure'),
            Output('chart-period-total', 'children'),
            Output('chart-period-total', 'style'),
        ],
        Input('journal-store', 'data'),
        prevent_initial_call=True
    )
    def update_pnl_chart(journal):
        """Update the monthly PnL chart."""
        if not journal:
            raise PreventUpdate

        by_month = journal.get('by_month', [])
        total = sum(row['pnl'] for row in by_month)
        style = {"color": COLORS['positive'] if total >= 0 else COLORS['negative']}

        return create_monthly_pnl_figure(by_month), format_money(total), style
