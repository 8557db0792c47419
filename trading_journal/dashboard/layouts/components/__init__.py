"""
Dashboard Components Package

Contains individual UI components for the dashboard.
"""
from dashboard.layouts.components.header import create_header
from dashboard.layouts.components.journal_summary import create_journal_summary
from dashboard.layouts.components.pnl_chart import create_pnl_chart
from dashboard.layouts.components.trade_list import create_trade_list, create_trade_card
from dashboard.layouts.components.strategy_leaderboard import (
    create_strategy_leaderboard,
    create_top_instruments
)
from dashboard.layouts.components.strategy_panel import create_strategy_panel, create_strategy_card
from dashboard.layouts.components.log_trade_modal import (
    create_log_trade_modal,
    create_delete_trade_modal
)
from dashboard.layouts.components.strategy_form_modal import (
    create_strategy_form_modal,
    create_archive_strategy_modal,
    create_technical_row
)

__all__ = [
    'create_header',
    'create_journal_summary',
    'create_pnl_chart',
    'create_trade_list',
    'create_trade_card',
    'create_strategy_leaderboard',
    'create_top_instruments',
    'create_strategy_panel',
    'create_strategy_card',
    'create_log_trade_modal',
    'create_delete_trade_modal',
    'create_strategy_form_modal',
    'create_archive_strategy_modal',
    'create_technical_row',
]
