"""
Trade Filters

Date-range presets, search, status/direction/strategy filtering and sorting
for lists of trade dictionaries.
"""
import re
from datetime import datetime, date, time, timedelta

from app.services.trade_metrics import parse_datetime, is_number

DATE_PRESETS = (
    'all', 'today', 'this-week', 'this-month', 'this-year',
    'last-week', 'last-month', 'last-year', 'last-7', 'last-30', 'custom'
)

SORT_OPTIONS = ('entry-desc', 'entry-asc', 'pnl-desc', 'pnl-asc')

_NON_ALNUM = re.compile(r'[^a-z0-9]')


def _start_of_day(day):
    return datetime.combine(day, time.min)


def _end_of_day(day):
    return datetime.combine(day, time.max)


def _month_end(day):
    next_month = (day.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)


def _as_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def resolve_date_range(preset, now=None, date_from=None, date_to=None):
    """
    Turn a preset name into an inclusive (start, end) datetime pair.

    Weeks start on Monday. 'all' resolves to None (no bound). A custom range
    with only one side is open on the other; from > to is swapped.

    Raises:
        ValueError: Unknown preset or unparseable custom date
    """
    if preset not in DATE_PRESETS:
        raise ValueError(f'Unknown date range: {preset}')

    now = now or datetime.now()
    today = now.date()

    if preset == 'all':
        return None
    if preset == 'today':
        return _start_of_day(today), _end_of_day(today)
    if preset == 'this-week':
        monday = today - timedelta(days=today.weekday())
        return _start_of_day(monday), _end_of_day(monday + timedelta(days=6))
    if preset == 'this-month':
        return _start_of_day(today.replace(day=1)), _end_of_day(_month_end(today))
    if preset == 'this-year':
        return _start_of_day(date(today.year, 1, 1)), _end_of_day(date(today.year, 12, 31))
    if preset == 'last-week':
        monday = today - timedelta(days=today.weekday() + 7)
        return _start_of_day(monday), _end_of_day(monday + timedelta(days=6))
    if preset == 'last-month':
        last_day = today.replace(day=1) - timedelta(days=1)
        return _start_of_day(last_day.replace(day=1)), _end_of_day(last_day)
    if preset == 'last-year':
        year = today.year - 1
        return _start_of_day(date(year, 1, 1)), _end_of_day(date(year, 12, 31))
    if preset == 'last-7':
        return _start_of_day(today - timedelta(days=6)), _end_of_day(today)
    if preset == 'last-30':
        return _start_of_day(today - timedelta(days=29)), _end_of_day(today)

    start, end = _as_date(date_from), _as_date(date_to)
    if start is None and end is None:
        return None
    if start and end and start > end:
        start, end = end, start
    return (
        _start_of_day(start) if start else None,
        _end_of_day(end) if end else None
    )


def normalize_symbol(value):
    """Lower-case and drop non-alphanumerics: 'BTC/USDT' -> 'btcusdt'."""
    return _NON_ALNUM.sub('', (value or '').lower())


def matches_search(trade, term):
    """Case-insensitive match of instrument or strategy name, also symbol-normalized."""
    term = (term or '').strip().lower()
    if not term:
        return True

    instrument = trade.get('instrument') or ''
    strategy = trade.get('strategy_name') or ''
    if term in instrument.lower() or term in strategy.lower():
        return True

    normalized = normalize_symbol(term)
    if not normalized:
        return False
    return normalized in normalize_symbol(instrument) or normalized in normalize_symbol(strategy)


def _in_range(trade, date_range):
    if date_range is None:
        return True
    entry = parse_datetime(trade.get('entry_datetime'))
    if entry is None:
        return False
    if entry.tzinfo is not None:
        entry = entry.replace(tzinfo=None)
    start, end = date_range
    return (start is None or entry >= start) and (end is None or entry <= end)


def filter_trades(trades, date_range=None, status='all', search='', direction=None, strategy_id=None):
    """
    Apply the journal filters to a list of trade dicts.

    Args:
        trades: Trade dicts
        date_range: (start, end) from resolve_date_range(), or None
        status: 'all', 'open' or 'closed' (closed = has exit datetime)
        search: Free-text instrument/strategy search
        direction: 'long', 'short', or None/'all'
        strategy_id: Strategy id, 'none' for untagged trades, or None for any

    Returns:
        New list, input order preserved
    """
    result = []
    for trade in trades:
        if not _in_range(trade, date_range):
            continue
        if status == 'open' and trade.get('exit_datetime'):
            continue
        if status == 'closed' and not trade.get('exit_datetime'):
            continue
        if direction and direction != 'all' and trade.get('direction') != direction:
            continue
        if strategy_id == 'none':
            if trade.get('strategy_id') is not None:
                continue
        elif strategy_id is not None and trade.get('strategy_id') != strategy_id:
            continue
        if not matches_search(trade, search):
            continue
        result.append(trade)
    return result


def sort_trades(trades, sort='entry-desc'):
    """
    Sort trade dicts.

    'pnl-*' orders put trades without a realized PnL last in both directions.
    Ties fall back to entry datetime, newest first.
    """
    if sort not in SORT_OPTIONS:
        raise ValueError(f'Unknown sort: {sort}')

    def entry_key(trade):
        entry = parse_datetime(trade.get('entry_datetime'))
        if entry is not None and entry.tzinfo is not None:
            entry = entry.replace(tzinfo=None)
        return entry or datetime.min

    if sort == 'entry-asc':
        return sorted(trades, key=lambda t: (entry_key(t), t.get('id') or 0))
    if sort == 'entry-desc':
        return sorted(trades, key=lambda t: (entry_key(t), t.get('id') or 0), reverse=True)

    by_entry = sorted(trades, key=entry_key, reverse=True)
    with_pnl = [t for t in by_entry if is_number(t.get('realized_pnl'))]
    without_pnl = [t for t in by_entry if not is_number(t.get('realized_pnl'))]
    with_pnl.sort(key=lambda t: t['realized_pnl'], reverse=(sort == 'pnl-desc'))
    return with_pnl + without_pnl


def apply_filters(trades, filters, now=None):
    """
    Resolve and apply a loaded TradeFilterSchema result in one step.

    Returns:
        Filtered and sorted list of trade dicts
    """
    filters = filters or {}
    date_range = resolve_date_range(
        filters.get('range', 'all'), now,
        filters.get('date_from'), filters.get('date_to')
    )
    filtered = filter_trades(
        trades,
        date_range=date_range,
        status=filters.get('status', 'all'),
        search=filters.get('search', ''),
        direction=filters.get('direction'),
        strategy_id=filters.get('strategy_id')
    )
    return sort_trades(filtered, filters.get('sort', 'entry-desc'))
