"""
Unit Tests for Trade Metrics

Tests the pure aggregation functions over trade dictionaries.
"""
import pytest

from app.services.trade_metrics import (
    summarize_trades, group_trades_by_month, build_instrument_leaderboard,
    build_strategy_stats, build_strategy_leaderboard, parse_datetime, is_number
)


def closed(instrument='BTCUSDT', pnl=100.0, r=1.0, entry='2024-10-02T09:00:00', strategy_id=None):
    return {
        'instrument': instrument,
        'entry_datetime': entry,
        'exit_datetime': entry.replace('09:00', '17:00'),
        'realized_pnl': pnl,
        'r_multiple': r,
        'strategy_id': strategy_id,
    }


def opened(instrument='SPX500', entry='2024-10-12T08:30:00', strategy_id=None):
    return {
        'instrument': instrument,
        'entry_datetime': entry,
        'exit_datetime': None,
        'realized_pnl': None,
        'r_multiple': None,
        'strategy_id': strategy_id,
    }


class TestSummarizeTrades:
    """Tests for summarize_trades()."""

    def test_empty(self):
        assert summarize_trades([]) == {
            'total': 0, 'open': 0, 'closed': 0, 'win_rate': 0, 'total_pnl': 0, 'avg_r': 0
        }

    def test_mixed_trades(self):
        trades = [
            closed(pnl=1425, r=2.3),
            closed(pnl=650, r=1.1),
            closed(pnl=-1100, r=-0.8),
            opened(),
        ]

        summary = summarize_trades(trades)

        assert summary['total'] == 4
        assert summary['open'] == 1
        assert summary['closed'] == 3
        assert summary['win_rate'] == pytest.approx(66.6667, rel=1e-4)
        assert summary['total_pnl'] == pytest.approx(975)
        assert summary['avg_r'] == pytest.approx(0.8667, rel=1e-3)

    def test_breakeven_is_not_a_win(self):
        summary = summarize_trades([closed(pnl=0), closed(pnl=10)])

        assert summary['win_rate'] == 50

    def test_missing_r_counts_as_zero(self):
        summary = summarize_trades([closed(r=2.0), closed(r=None)])

        assert summary['avg_r'] == 1.0

    def test_exit_without_pnl_is_neither(self):
        """A trade with an exit but no PnL is not open and not closed."""
        trade = closed()
        trade['realized_pnl'] = None

        summary = summarize_trades([trade])

        assert summary['total'] == 1
        assert summary['open'] == 0
        assert summary['closed'] == 0
        assert summary['win_rate'] == 0

    def test_pnl_sum_has_no_float_noise(self):
        summary = summarize_trades([closed(pnl=0.1), closed(pnl=0.2)])

        assert summary['total_pnl'] == 0.3

    def test_only_open_trades(self):
        summary = summarize_trades([opened(), opened()])

        assert summary['open'] == 2
        assert summary['total_pnl'] == 0
        assert summary['avg_r'] == 0


class TestGroupTradesByMonth:
    """Tests for group_trades_by_month()."""

    def test_chronological_regardless_of_input(self):
        trades = [
            closed(pnl=50, entry='2024-12-03T09:00:00'),
            closed(pnl=100, entry='2024-02-10T09:00:00'),
            closed(pnl=-20, entry='2024-12-20T09:00:00'),
            closed(pnl=10, entry='2023-12-31T09:00:00'),
        ]

        months = group_trades_by_month(trades)

        assert months == [
            {'month': '2023-12', 'label': 'Dec 2023', 'pnl': 10},
            {'month': '2024-02', 'label': 'Feb 2024', 'pnl': 100},
            {'month': '2024-12', 'label': 'Dec 2024', 'pnl': 30},
        ]

    def test_month_sum_has_no_float_noise(self):
        months = group_trades_by_month([closed(pnl=0.1), closed(pnl=0.2)])

        assert months[0]['pnl'] == 0.3

    def test_open_trades_count_as_zero(self):
        months = group_trades_by_month([opened(entry='2024-10-12T08:30:00')])

        assert months == [{'month': '2024-10', 'label': 'Oct 2024', 'pnl': 0}]

    def test_unparseable_entries_skipped(self):
        trade = closed()
        trade['entry_datetime'] = 'not a date'

        assert group_trades_by_month([trade]) == []


class TestInstrumentLeaderboard:
    """Tests for build_instrument_leaderboard()."""

    def test_ranked_by_pnl(self):
        trades = [
            closed('AAPL', pnl=-1100),
            closed('BTCUSDT', pnl=1425),
            closed('ETHUSDT', pnl=650),
            closed('BTCUSDT', pnl=-25),
            opened('SPX500'),
        ]

        board = build_instrument_leaderboard(trades)

        assert board == [
            {'instrument': 'BTCUSDT', 'total_pnl': 1400, 'trades': 2, 'win_rate': 50},
            {'instrument': 'ETHUSDT', 'total_pnl': 650, 'trades': 1, 'win_rate': 100},
            {'instrument': 'SPX500', 'total_pnl': 0, 'trades': 1, 'win_rate': 0},
        ]

    def test_ties_break_on_name(self):
        board = build_instrument_leaderboard([closed('ZEC', pnl=5), closed('ADA', pnl=5)], limit=5)

        assert [row['instrument'] for row in board] == ['ADA', 'ZEC']

    def test_limit(self):
        trades = [closed(name, pnl=i) for i, name in enumerate(['A', 'B', 'C', 'D', 'E'])]

        assert len(build_instrument_leaderboard(trades, limit=2)) == 2


class TestStrategyStats:
    """Tests for build_strategy_stats() and build_strategy_leaderboard()."""

    def test_grouped_by_strategy(self):
        trades = [
            closed('BTCUSDT', pnl=100, entry='2024-10-01T09:00:00', strategy_id=1),
            closed('ETHUSDT', pnl=-40, entry='2024-10-09T09:00:00', strategy_id=1),
            closed('AAPL', pnl=70, strategy_id=2),
            closed('SOLUSDT', pnl=999),
        ]

        stats = build_strategy_stats(trades)

        assert set(stats) == {1, 2}
        assert stats[1]['total'] == 2
        assert stats[1]['total_pnl'] == 60
        assert stats[1]['last_trade_at'] == '2024-10-09T09:00:00'
        assert [row['instrument'] for row in stats[1]['top_instruments']] == ['BTCUSDT', 'ETHUSDT']

    def test_leaderboard_active_only(self):
        strategies = [
            {'id': 1, 'name': 'Alpha', 'is_active': True},
            {'id': 2, 'name': 'Beta', 'is_active': True},
            {'id': 3, 'name': 'Archived', 'is_active': False},
            {'id': 4, 'name': 'Fresh', 'is_active': True},
        ]
        stats = build_strategy_stats([
            closed(pnl=300, strategy_id=1),
            closed(pnl=-50, strategy_id=2),
            closed(pnl=5000, strategy_id=3),
        ])

        board = build_strategy_leaderboard(strategies, stats, limit=2)

        assert [row['name'] for row in board['best']] == ['Alpha', 'Fresh']
        assert [row['name'] for row in board['worst']] == ['Beta', 'Fresh']
        assert board['best'][1]['stats']['total'] == 0


class TestHelpers:
    """Tests for the parsing helpers."""

    def test_parse_datetime_accepts_z(self):
        parsed = parse_datetime('2024-10-02T09:15:00Z')

        assert parsed.year == 2024
        assert parsed.utcoffset().total_seconds() == 0

    def test_parse_datetime_rejects_junk(self):
        assert parse_datetime('') is None
        assert parse_datetime(None) is None
        assert parse_datetime('tomorrow') is None

    def test_is_number(self):
        assert is_number(1) and is_number(-2.5)
        assert not is_number(True)
        assert not is_number(None)
        assert not is_number('3')
