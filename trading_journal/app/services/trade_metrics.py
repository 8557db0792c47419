"""
Trade Metrics

Pure aggregation over trade dictionaries (the Trade.to_dict() shape).
No database access; every function is deterministic for a given input.

Definitions:
    closed trade: has an exit datetime and a numeric realized_pnl
    open trade:   has no exit datetime
    win:          closed trade with realized_pnl > 0
"""
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

PNL_QUANTUM = Decimal('0.0001')


def is_number(value):
    """True for int/float values; bools and None are not PnL numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_datetime(value):
    """Accept a datetime or an ISO-8601 string; return None when unparseable."""
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def is_closed(trade):
    return bool(trade.get('exit_datetime')) and is_number(trade.get('realized_pnl'))


def is_open(trade):
    return not trade.get('exit_datetime')


def _number_or_zero(value):
    return value if is_number(value) else 0


def to_decimal(value):
    """Convert a number to Decimal via its string form."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def sum_money(values):
    """Sum amounts in Decimal and round to the stored PnL precision."""
    total = sum((to_decimal(_number_or_zero(v)) for v in values), Decimal('0'))
    return float(total.quantize(PNL_QUANTUM, rounding=ROUND_HALF_UP))


def summarize_trades(trades):
    """
    Summary figures for a list of trades.

    Returns:
        Dictionary with total, open, closed, win_rate (percent),
        total_pnl (closed trades only) and avg_r (closed trades,
        missing r_multiple counted as 0)

    Example:
        >>> summarize_trades([
        ...     {'exit_datetime': None},
        ...     {'exit_datetime': '2024-10-04T10:00:00', 'realized_pnl': 100, 'r_multiple': 2},
        ...     {'exit_datetime': '2024-10-05T10:00:00', 'realized_pnl': -50, 'r_multiple': -1},
        ... ])['win_rate']
        50.0
    """
    if not trades:
        return {
            'total': 0,
            'open': 0,
            'closed': 0,
            'win_rate': 0,
            'total_pnl': 0,
            'avg_r': 0
        }

    closed = [t for t in trades if is_closed(t)]
    wins = [t for t in closed if t['realized_pnl'] > 0]
    total_pnl = sum_money(t['realized_pnl'] for t in closed)
    avg_r = (
        sum(_number_or_zero(t.get('r_multiple')) for t in closed) / len(closed)
        if closed else 0
    )

    return {
        'total': len(trades),
        'open': sum(1 for t in trades if is_open(t)),
        'closed': len(closed),
        'win_rate': (len(wins) / len(closed)) * 100 if closed else 0,
        'total_pnl': total_pnl,
        'avg_r': avg_r
    }


def group_trades_by_month(trades):
    """
    Sum realized PnL per entry month.

    Returns:
        List of {month: 'YYYY-MM', label: 'Oct 2024', pnl} in chronological
        order regardless of input order. Missing PnL counts as 0.
    """
    buckets = {}
    for trade in trades:
        entry = parse_datetime(trade.get('entry_datetime'))
        if entry is None:
            continue
        key = (entry.year, entry.month)
        buckets.setdefault(key, []).append(trade.get('realized_pnl'))

    return [
        {
            'month': f'{year:04d}-{month:02d}',
            'label': datetime(year, month, 1).strftime('%b %Y'),
            'pnl': sum_money(amounts)
        }
        for (year, month), amounts in sorted(buckets.items())
    ]


def build_instrument_leaderboard(trades, limit=3):
    """
    Rank instruments by realized PnL.

    Args:
        trades: List of trade dicts
        limit: Maximum number of rows returned

    Returns:
        List of {instrument, total_pnl, trades, win_rate}; `trades` counts all
        trades on the instrument, PnL and win rate use its closed trades.
        Sorted by total_pnl desc, then instrument asc.
    """
    grouped = OrderedDict()
    for trade in trades:
        instrument = trade.get('instrument')
        if not instrument:
            continue
        grouped.setdefault(instrument, []).append(trade)

    rows = []
    for instrument, items in grouped.items():
        summary = summarize_trades(items)
        rows.append({
            'instrument': instrument,
            'total_pnl': summary['total_pnl'],
            'trades': len(items),
            'win_rate': summary['win_rate']
        })

    rows.sort(key=lambda row: (-row['total_pnl'], row['instrument']))
    return rows[:limit]


def build_strategy_stats(trades):
    """
    Per-strategy summary for tagged trades.

    Returns:
        {strategy_id: summary + last_trade_at + top_instruments}
    """
    grouped = {}
    for trade in trades:
        strategy_id = trade.get('strategy_id')
        if strategy_id is None:
            continue
        grouped.setdefault(strategy_id, []).append(trade)

    stats = {}
    for strategy_id, items in grouped.items():
        entries = [d for d in (parse_datetime(t.get('entry_datetime')) for t in items) if d]
        stats[strategy_id] = dict(
            summarize_trades(items),
            last_trade_at=max(entries).isoformat() if entries else None,
            top_instruments=build_instrument_leaderboard(items)
        )
    return stats


def empty_strategy_stats():
    return dict(summarize_trades([]), last_trade_at=None, top_instruments=[])


def build_strategy_leaderboard(strategies, stats, limit=3):
    """
    Best and worst active strategies by total PnL.

    Args:
        strategies: Strategy dicts (need id, name, is_active)
        stats: Output of build_strategy_stats(); missing entries count as zeros
        limit: Rows per side

    Returns:
        {'best': [...], 'worst': [...]} where each row is the strategy dict
        merged with its stats
    """
    rows = []
    for strategy in strategies:
        if not strategy.get('is_active'):
            continue
        strategy_stats = stats.get(strategy['id']) or empty_strategy_stats()
        rows.append(dict(strategy, stats=strategy_stats))

    best = sorted(rows, key=lambda row: (-row['stats']['total_pnl'], row.get('name') or ''))
    worst = sorted(rows, key=lambda row: (row['stats']['total_pnl'], row.get('name') or ''))
    return {'best': best[:limit], 'worst': worst[:limit]}
