"""
Business Logic Services Package

Contains authentication helpers, trade aggregation, filtering and export.
The model-backed services live in their own modules:

    from app.services.trade_service import TradeService
    from app.services.strategy_service import StrategyService
"""
from app.services.auth_service import (
    hash_password,
    verify_password,
    create_token,
    verify_token,
    get_current_user,
    set_auth_cookie,
    delete_auth_cookie,
    login_user
)

from app.services.trade_metrics import (
    summarize_trades,
    group_trades_by_month,
    build_instrument_leaderboard,
    build_strategy_stats,
    build_strategy_leaderboard
)

from app.services.trade_filters import (
    resolve_date_range,
    filter_trades,
    sort_trades,
    apply_filters,
    DATE_PRESETS,
    SORT_OPTIONS
)

from app.services.csv_export import (
    build_trade_csv_rows,
    rows_to_csv,
    trades_to_csv,
    TRADE_CSV_HEADERS
)

__all__ = [
    # Auth
    'hash_password',
    'verify_password',
    'create_token',
    'verify_token',
    'get_current_user',
    'set_auth_cookie',
    'delete_auth_cookie',
    'login_user',
    # Metrics
    'summarize_trades',
    'group_trades_by_month',
    'build_instrument_leaderboard',
    'build_strategy_stats',
    'build_strategy_leaderboard',
    # Filters
    'resolve_date_range',
    'filter_trades',
    'sort_trades',
    'apply_filters',
    'DATE_PRESETS',
    'SORT_OPTIONS',
    # CSV export
    'build_trade_csv_rows',
    'rows_to_csv',
    'trades_to_csv',
    'TRADE_CSV_HEADERS'
]
