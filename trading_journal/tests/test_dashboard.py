"""
Tests for the Dashboard Helpers

Layout construction and the pure functions behind the callbacks.
The Dash app itself is not mounted here.
"""
from datetime import datetime

import pytest
from marshmallow import ValidationError

from app.validation.schemas import TradeSchema, StrategySchema
from dashboard.callbacks.chart_callbacks import create_monthly_pnl_figure
from dashboard.callbacks.data_callbacks import build_filters, build_journal_view, format_summary
from dashboard.callbacks.strategy_callbacks import strategy_options, strategy_count_label
from dashboard.callbacks.strategy_form_callbacks import (
    collect_technicals, build_strategy_payload, strategy_form_values, archive_prompt
)
from dashboard.callbacks.trade_callbacks import (
    build_trade_payload, export_filename, trade_form_values, delete_prompt
)
from dashboard.layouts.components.strategy_panel import create_strategy_card, format_technical
from dashboard.layouts.components.trade_list import (
    create_trade_card, format_money, format_r, format_datetime, ALL_STRATEGIES, NO_STRATEGY
)
from dashboard.layouts.main_layout import create_main_layout

NOW = datetime(2024, 10, 16, 13, 45)

TRADES = [
    {
        'id': 1, 'instrument': 'BTCUSDT', 'direction': 'long',
        'entry_datetime': '2024-10-02T09:15:00', 'exit_datetime': '2024-10-04T12:45:00',
        'entry_price': 60000.0, 'exit_price': 62850.0, 'position_size': 0.5,
        'realized_pnl': 1425.0, 'r_multiple': 2.85, 'platform': 'Binance',
        'strategy_id': 7, 'strategy_name': 'S/R Breakout',
    },
    {
        'id': 2, 'instrument': 'AAPL', 'direction': 'long',
        'entry_datetime': '2024-09-20T14:00:00', 'exit_datetime': '2024-09-21T15:00:00',
        'entry_price': 230.0, 'exit_price': 219.0, 'position_size': 100,
        'realized_pnl': -1100.0, 'r_multiple': -1.0, 'platform': None,
        'strategy_id': None, 'strategy_name': None,
    },
    {
        'id': 3, 'instrument': 'SPX500', 'direction': 'short',
        'entry_datetime': '2024-10-15T08:30:00', 'exit_datetime': None,
        'entry_price': 5800.0, 'exit_price': None, 'position_size': 1,
        'realized_pnl': None, 'r_multiple': None, 'platform': 'IG',
        'strategy_id': None, 'strategy_name': None,
    },
]


def walk(component):
    """Yield every component and string below (and including) component."""
    stack = [component]
    while stack:
        node = stack.pop()
        if node is None:
            continue
        if isinstance(node, (list, tuple)):
            stack.extend(node)
            continue
        yield node
        if not isinstance(node, str):
            stack.append(getattr(node, 'children', None))


def _ids(component):
    return [getattr(node, 'id', None) for node in walk(component) if not isinstance(node, str)]


def component_ids(component):
    return {node_id for node_id in _ids(component) if isinstance(node_id, str)}


def pattern_ids(component):
    """(type, index) pairs of the pattern-matching ids below component."""
    return {(i['type'], i['index']) for i in _ids(component) if isinstance(i, dict)}


def texts(component):
    return [node for node in walk(component) if isinstance(node, str)]


class TestLayout:
    """Tests for the dashboard layout tree."""

    def test_main_layout_has_callback_targets(self):
        ids = component_ids(create_main_layout())
        for expected in (
            'stat-total-trades', 'stat-win-rate', 'stat-total-pnl', 'stat-avg-r',
            'pnl-chart', 'trade-list-container', 'filter-range', 'filter-strategy',
            'log-trade-modal', 'save-trade-btn', 'trade-strategy', 'notifications-container',
            'leaderboard-best', 'leaderboard-worst', 'top-instruments-container',
            'strategy-list-container', 'strategy-count-badge', 'new-strategy-btn',
            'strategy-filter-status', 'strategy-filter-search', 'strategy-filter-sort',
            'strategy-form-modal', 'technicals-container', 'add-technical-btn',
            'save-strategy-btn', 'archive-strategy-modal', 'archive-reason',
            'delete-trade-modal', 'confirm-delete-trade-btn',
        ):
            assert expected in ids


class TestFormatting:
    """Tests for the display formatters."""

    def test_format_money(self):
        assert format_money(1425) == '$1,425.00'
        assert format_money(-1100) == '-$1,100.00'
        assert format_money(None) == '--'

    def test_format_r(self):
        assert format_r(2.85) == '+2.85R'
        assert format_r(-1) == '-1.00R'
        assert format_r(None) == '--'

    def test_format_datetime(self):
        assert format_datetime('2024-10-02T09:15:00') == '2024-10-02 09:15'
        assert format_datetime(None) == ''

    def test_format_summary(self):
        texts_ = format_summary({
            'total': 4, 'win_rate': 66.666, 'total_pnl': -1100, 'avg_r': 0.5, 'open': 1
        })

        assert texts_ == {
            'total': '4',
            'win_rate': '66.7%',
            'total_pnl': '-$1,100.00',
            'avg_r': '0.50R',
            'open': '1',
        }


class TestTradeCard:
    """Tests for create_trade_card()."""

    def test_closed_trade_shows_pnl(self):
        card_texts = texts(create_trade_card(TRADES[0]))

        assert 'BTCUSDT' in card_texts
        assert '$1,425.00' in card_texts
        assert 'S/R Breakout' in card_texts
        assert '+2.85R' in card_texts

    def test_open_trade_is_marked(self):
        card_texts = texts(create_trade_card(TRADES[2]))

        assert 'OPEN' in card_texts
        assert 'No strategy' in card_texts

    def test_actions_target_the_trade(self):
        ids = pattern_ids(create_trade_card(TRADES[0]))

        assert ids == {('edit-trade-btn', 1), ('delete-trade-btn', 1)}

    def test_unsaved_trade_has_no_actions(self):
        trade = dict(TRADES[0])
        del trade['id']

        assert pattern_ids(create_trade_card(trade)) == set()


class TestBuildFilters:
    """Tests for build_filters()."""

    def test_defaults(self):
        filters = build_filters()

        assert filters['range'] == 'all'
        assert filters['status'] == 'all'
        assert filters['strategy_id'] is None

    def test_strategy_selection(self):
        assert build_filters(strategy_value=ALL_STRATEGIES)['strategy_id'] is None
        assert build_filters(strategy_value=NO_STRATEGY)['strategy_id'] == 'none'
        assert build_filters(strategy_value='7')['strategy_id'] == 7

    def test_custom_range_dates(self):
        filters = build_filters('custom', ' 2024-10-01 ', '2024-10-31')

        assert filters['date_from'].isoformat() == '2024-10-01'
        assert filters['date_to'].isoformat() == '2024-10-31'

    def test_custom_range_needs_a_date(self):
        with pytest.raises(ValidationError):
            build_filters('custom')

    def test_bad_date_rejected(self):
        with pytest.raises(ValidationError):
            build_filters('custom', 'next tuesday')


class TestBuildJournalView:
    """Tests for build_journal_view()."""

    def test_all_time(self):
        view = build_journal_view(TRADES, build_filters(), now=NOW)

        assert [t['id'] for t in view['trades']] == [3, 1, 2]
        assert view['summary']['total'] == 3
        assert view['summary']['open'] == 1
        assert view['summary']['total_pnl'] == 325.0
        assert [row['month'] for row in view['by_month']] == ['2024-09', '2024-10']
        assert view['top_instruments'][0]['instrument'] == 'BTCUSDT'

    def test_range_scopes_every_panel(self):
        view = build_journal_view(TRADES, build_filters('this-month'), now=NOW)

        assert [t['id'] for t in view['trades']] == [3, 1]
        assert view['summary']['total'] == 2
        assert view['summary']['total_pnl'] == 1425.0
        assert [row['month'] for row in view['by_month']] == ['2024-10']
        assert view['range'] == 'this-month'

    def test_list_filters_leave_summary_alone(self):
        view = build_journal_view(TRADES, build_filters(status='closed', search='btc'), now=NOW)

        assert [t['id'] for t in view['trades']] == [1]
        assert view['summary']['total'] == 3

    def test_untagged_strategy_filter(self):
        view = build_journal_view(TRADES, build_filters(strategy_value=NO_STRATEGY), now=NOW)

        assert [t['id'] for t in view['trades']] == [3, 2]


class TestPnlFigure:
    """Tests for create_monthly_pnl_figure()."""

    def test_bars_follow_months(self):
        fig = create_monthly_pnl_figure([
            {'month': '2024-09', 'label': 'Sep 2024', 'pnl': -1100.0},
            {'month': '2024-10', 'label': 'Oct 2024', 'pnl': 1425.0},
        ])

        assert list(fig.data[0].x) == ['Sep 2024', 'Oct 2024']
        assert list(fig.data[0].y) == [-1100.0, 1425.0]
        assert len(fig.layout.annotations) == 0

    def test_empty_shows_placeholder(self):
        fig = create_monthly_pnl_figure([])

        assert len(fig.layout.annotations) == 1


class TestStrategyOptions:
    """Tests for strategy_options()."""

    STRATEGIES = [
        {'id': 3, 'name': 'Breakout', 'is_active': True},
        {'id': 5, 'name': 'Scalp', 'is_active': False},
    ]

    def test_filter_options(self):
        options = strategy_options(self.STRATEGIES)

        assert [o['value'] for o in options] == [ALL_STRATEGIES, NO_STRATEGY, '3', '5']
        assert options[-1]['label'] == 'Scalp (archived)'

    def test_form_options(self):
        options = strategy_options(self.STRATEGIES[:1], include_all=False)

        assert [o['value'] for o in options] == [NO_STRATEGY, '3']


class TestTradeForm:
    """Tests for the log-trade form helpers."""

    def form(self, **overrides):
        values = dict(
            instrument='btcusdt', direction='long', entry_datetime='2024-10-02T09:15:00',
            exit_datetime='', entry_price=60000, exit_price='', position_size=0.5,
            realized_pnl='', r_multiple='', platform='', strategy_value=NO_STRATEGY
        )
        values.update(overrides)
        return build_trade_payload(**values)

    def test_blank_values_load_as_open_trade(self):
        payload = self.form()

        assert payload['strategy_id'] is None
        assert payload['platform'] is None

        data = TradeSchema().load(payload)
        assert data['instrument'] == 'BTCUSDT'
        assert data['exit_datetime'] is None
        assert data['realized_pnl'] is None

    def test_selected_strategy_loads_as_int(self):
        data = TradeSchema().load(self.form(strategy_value='3'))

        assert data['strategy_id'] == 3

    def test_missing_entry_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            TradeSchema().load(self.form(entry_price=''))

        assert 'entry_price' in exc.value.messages

    def test_export_filename(self):
        assert export_filename(datetime(2024, 10, 16, 23, 59)) == 'trades-2024-10-16.csv'

    def test_edit_values_fill_form(self):
        values = trade_form_values(TRADES[0])

        assert values == (
            'BTCUSDT', 'long', '2024-10-02T09:15:00', '2024-10-04T12:45:00',
            60000.0, 62850.0, 0.5, 1425.0, 2.85, 'Binance', '7'
        )

    def test_edit_values_load_back(self):
        data = TradeSchema().load(build_trade_payload(*trade_form_values(TRADES[2])))

        assert data['direction'] == 'short'
        assert data['exit_datetime'] is None
        assert data['exit_price'] is None
        assert data['strategy_id'] is None
        assert data['platform'] == 'IG'

    def test_new_trade_resets_form(self):
        values = trade_form_values()

        assert values[:2] == ('', 'long')
        assert values[-1] == NO_STRATEGY
        assert set(values[2:-1]) == {''}

    def test_delete_prompt(self):
        prompt = delete_prompt(TRADES[2])

        assert 'SHORT SPX500' in prompt
        assert '2024-10-15 08:30' in prompt


class TestStrategyCard:
    """Tests for the strategy panel cards."""

    STRATEGY = {
        'id': 3, 'name': 'Breakout', 'short_code': 'BRK_H4', 'is_active': True,
        'setup_description': 'Break and retest', 'archived_reason': None,
        'technicals': [
            {'indicator': 'RSI', 'timeframe': 'H4', 'condition': 'Above 50', 'is_required': True},
            {'indicator': 'Volume', 'timeframe': None, 'condition': 'Rising', 'is_required': False},
        ],
        'stats': {'closed': 2, 'win_rate': 50.0, 'total_pnl': 325.0},
    }

    def test_active_strategy(self):
        card = create_strategy_card(self.STRATEGY)
        card_texts = texts(card)

        assert 'Breakout' in card_texts
        assert 'BRK_H4' in card_texts
        assert 'RSI (H4): Above 50' in card_texts
        assert '$325.00' in card_texts
        assert 'Archive' in card_texts
        assert pattern_ids(card) == {('edit-strategy-btn', 3), ('toggle-strategy-btn', 3)}

    def test_archived_strategy_offers_restore(self):
        strategy = dict(self.STRATEGY, is_active=False, archived_reason='Stopped working', technicals=[])
        card_texts = texts(create_strategy_card(strategy))

        assert 'Restore' in card_texts
        assert 'Archive' not in card_texts
        assert 'ARCHIVED' in card_texts
        assert 'Archived: Stopped working' in card_texts
        assert 'No technical conditions' in card_texts

    def test_missing_stats_show_zero(self):
        strategy = dict(self.STRATEGY)
        del strategy['stats']

        assert '$0.00' in texts(create_strategy_card(strategy))

    def test_format_technical(self):
        assert format_technical(self.STRATEGY['technicals'][1]) == 'Volume: Rising'

    def test_count_label(self):
        assert strategy_count_label(0) == '0 strategies'
        assert strategy_count_label(1) == '1 strategy'


class TestStrategyForm:
    """Tests for the strategy form helpers."""

    def test_collect_skips_blank_rows(self):
        rows = collect_technicals(
            ['RSI', '', 'Volume'], ['H4', '', None], ['Above 50', ' ', 'Rising'], [True, True, False]
        )

        assert rows == [
            {'indicator': 'RSI', 'timeframe': 'H4', 'condition': 'Above 50', 'is_required': True},
            {'indicator': 'Volume', 'timeframe': None, 'condition': 'Rising', 'is_required': False},
        ]

    def test_collect_keeps_blank_rows_for_editor(self):
        rows = collect_technicals(['RSI', ''], ['H4', ''], ['Above 50', ''], [True, False],
                                  keep_blank=True)

        assert len(rows) == 2
        assert rows[1]['is_required'] is False

    def test_unchecked_state_defaults_to_required(self):
        rows = collect_technicals(['RSI'], ['H4'], ['Above 50'], [])

        assert rows[0]['is_required'] is True

    def test_payload_loads(self):
        payload = build_strategy_payload(
            ' Breakout ', '', 'Break and retest', None,
            collect_technicals(['RSI', 'Volume'], ['H4', ''], ['Above 50', 'Rising'], [True, True])
        )
        data = StrategySchema().load(payload)

        assert data['name'] == 'Breakout'
        assert data['short_code'] is None
        assert data['is_active'] is True
        assert [t['display_order'] for t in data['technicals']] == [1, 2]
        assert data['technicals'][1]['timeframe'] is None

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError) as exc:
            StrategySchema().load(build_strategy_payload('', None, None, None, []))

        assert 'name' in exc.value.messages

    def test_half_filled_row_rejected(self):
        payload = build_strategy_payload(
            'Breakout', None, None, None, collect_technicals(['RSI'], [''], [''], [True])
        )

        with pytest.raises(ValidationError) as exc:
            StrategySchema().load(payload)

        assert 'technicals' in exc.value.messages

    def test_edit_partial_load_keeps_status(self):
        data = StrategySchema().load(build_strategy_payload('Breakout', None, None, None, []),
                                     partial=True)

        assert 'is_active' not in data
        assert data['technicals'] == []

    def test_archive_payload(self):
        data = StrategySchema().load({'is_active': False, 'archived_reason': '  '}, partial=True)

        assert data == {'is_active': False, 'archived_reason': None}

    def test_form_values_for_edit(self):
        name, short_code, setup, notes, rows = strategy_form_values(TestStrategyCard.STRATEGY)

        assert (name, short_code, setup, notes) == ('Breakout', 'BRK_H4', 'Break and retest', '')
        assert ('technical-indicator', 1) in pattern_ids(rows)
        assert len(rows) == 2

    def test_form_values_for_new(self):
        values = strategy_form_values()

        assert values[:4] == ('', '', '', '')
        assert len(values[4]) == 1

    def test_archive_prompt(self):
        assert '"Breakout"' in archive_prompt(TestStrategyCard.STRATEGY)
