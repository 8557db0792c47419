"""
Unit Tests for Trade Filters

Date-range presets, search, status/strategy filters and sorting.
"""
from datetime import datetime, date

import pytest

from app.services.trade_filters import (
    resolve_date_range, filter_trades, sort_trades, apply_filters,
    normalize_symbol, matches_search
)

# Wednesday
NOW = datetime(2024, 10, 16, 13, 45)


def trade(id, instrument, entry, exit=None, pnl=None, strategy_id=None, strategy_name=None,
          direction='long'):
    return {
        'id': id,
        'instrument': instrument,
        'direction': direction,
        'entry_datetime': entry,
        'exit_datetime': exit,
        'realized_pnl': pnl,
        'strategy_id': strategy_id,
        'strategy_name': strategy_name,
    }


TRADES = [
    trade(1, 'BTCUSDT', '2024-10-02T09:15:00', '2024-10-04T12:45:00', 1425, 7, 'S/R Breakout'),
    trade(2, 'ETHUSDT', '2024-10-14T00:00:00', '2024-10-15T10:00:00', 650, 7, 'S/R Breakout', 'short'),
    trade(3, 'AAPL', '2024-09-30T23:59:59', '2024-10-01T20:10:00', -1100),
    trade(4, 'SPX500', '2024-10-16T08:30:00', strategy_id=9, strategy_name='Elliott Wave Reversal',
          direction='short'),
]


def ids(trades):
    return [t['id'] for t in trades]


class TestResolveDateRange:
    """Tests for resolve_date_range()."""

    def test_all_is_unbounded(self):
        assert resolve_date_range('all', NOW) is None

    @pytest.mark.parametrize('preset, start, end', [
        ('today', date(2024, 10, 16), date(2024, 10, 16)),
        ('this-week', date(2024, 10, 14), date(2024, 10, 20)),
        ('this-month', date(2024, 10, 1), date(2024, 10, 31)),
        ('this-year', date(2024, 1, 1), date(2024, 12, 31)),
        ('last-week', date(2024, 10, 7), date(2024, 10, 13)),
        ('last-month', date(2024, 9, 1), date(2024, 9, 30)),
        ('last-year', date(2023, 1, 1), date(2023, 12, 31)),
        ('last-7', date(2024, 10, 10), date(2024, 10, 16)),
        ('last-30', date(2024, 9, 17), date(2024, 10, 16)),
    ])
    def test_presets(self, preset, start, end):
        range_start, range_end = resolve_date_range(preset, NOW)

        assert range_start == datetime.combine(start, datetime.min.time())
        assert range_end.date() == end
        assert range_end.hour == 23 and range_end.minute == 59

    def test_last_month_in_january(self):
        start, end = resolve_date_range('last-month', datetime(2024, 1, 10))

        assert start == datetime(2023, 12, 1)
        assert end.date() == date(2023, 12, 31)

    def test_this_month_in_february_leap_year(self):
        _, end = resolve_date_range('this-month', datetime(2024, 2, 10))

        assert end.date() == date(2024, 2, 29)

    def test_custom_swaps_reversed_bounds(self):
        start, end = resolve_date_range('custom', NOW, date(2024, 10, 5), date(2024, 10, 1))

        assert start == datetime(2024, 10, 1)
        assert end.date() == date(2024, 10, 5)

    def test_custom_open_ended(self):
        start, end = resolve_date_range('custom', NOW, date_from='2024-10-05')

        assert start == datetime(2024, 10, 5)
        assert end is None

    def test_custom_without_bounds(self):
        assert resolve_date_range('custom', NOW) is None

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            resolve_date_range('fortnight', NOW)


class TestFilterTrades:
    """Tests for filter_trades()."""

    def test_no_filters_keeps_order(self):
        assert ids(filter_trades(TRADES)) == [1, 2, 3, 4]

    def test_date_range_is_inclusive(self):
        date_range = resolve_date_range('this-week', NOW)

        assert ids(filter_trades(TRADES, date_range=date_range)) == [2, 4]

    def test_range_boundary_end_of_day(self):
        date_range = resolve_date_range('last-month', NOW)

        assert ids(filter_trades(TRADES, date_range=date_range)) == [3]

    def test_status(self):
        assert ids(filter_trades(TRADES, status='open')) == [4]
        assert ids(filter_trades(TRADES, status='closed')) == [1, 2, 3]

    def test_direction(self):
        assert ids(filter_trades(TRADES, direction='short')) == [2, 4]
        assert ids(filter_trades(TRADES, direction='all')) == [1, 2, 3, 4]

    def test_strategy(self):
        assert ids(filter_trades(TRADES, strategy_id=7)) == [1, 2]
        assert ids(filter_trades(TRADES, strategy_id='none')) == [3]

    def test_search(self):
        assert ids(filter_trades(TRADES, search='elliott')) == [4]
        assert ids(filter_trades(TRADES, search='  usdt ')) == [1, 2]
        assert ids(filter_trades(TRADES, search='zzz')) == []

    def test_combined(self):
        result = filter_trades(TRADES, status='closed', search='usdt', direction='long')

        assert ids(result) == [1]


class TestSearchHelpers:
    """Tests for symbol normalization."""

    def test_normalize_symbol(self):
        assert normalize_symbol('BTC/USDT') == 'btcusdt'
        assert normalize_symbol('S&P-500') == 'sp500'
        assert normalize_symbol(None) == ''

    def test_separator_insensitive_match(self):
        assert matches_search(TRADES[0], 'btc-usdt')
        assert matches_search(TRADES[0], 's/r')
        assert matches_search(TRADES[0], '')
        assert not matches_search(TRADES[0], '---')


class TestSortTrades:
    """Tests for sort_trades()."""

    def test_entry_desc(self):
        assert ids(sort_trades(TRADES)) == [4, 2, 1, 3]

    def test_entry_asc(self):
        assert ids(sort_trades(TRADES, 'entry-asc')) == [3, 1, 2, 4]

    def test_entry_ties_use_id(self):
        twins = [trade(5, 'A', '2024-10-01T00:00:00'), trade(6, 'B', '2024-10-01T00:00:00')]

        assert ids(sort_trades(twins, 'entry-desc')) == [6, 5]

    def test_pnl_sorts_put_missing_last(self):
        assert ids(sort_trades(TRADES, 'pnl-desc')) == [1, 2, 3, 4]
        assert ids(sort_trades(TRADES, 'pnl-asc')) == [3, 2, 1, 4]

    def test_unknown_sort(self):
        with pytest.raises(ValueError):
            sort_trades(TRADES, 'alphabetical')


class TestApplyFilters:
    """Tests for apply_filters()."""

    def test_defaults(self):
        assert ids(apply_filters(TRADES, None, now=NOW)) == [4, 2, 1, 3]

    def test_loaded_filters(self):
        filters = {
            'range': 'this-month',
            'status': 'closed',
            'search': '',
            'direction': 'all',
            'strategy_id': None,
            'sort': 'pnl-asc',
        }

        assert ids(apply_filters(TRADES, filters, now=NOW)) == [2, 1]
