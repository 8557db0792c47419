"""
Unit Tests for CSV Export
"""
from app.services.csv_export import (
    TRADE_CSV_HEADERS, build_trade_csv_rows, rows_to_csv, trades_to_csv
)

CLOSED = {
    'instrument': 'BTCUSDT',
    'platform': 'Binance',
    'direction': 'long',
    'entry_datetime': '2024-10-02T09:15:00',
    'exit_datetime': '2024-10-04T12:45:00',
    'entry_price': 62000.0,
    'exit_price': 64850.0,
    'position_size': 0.5,
    'realized_pnl': 1425.0,
    'r_multiple': 2.3,
    'strategy_name': 'Support/Resistance Breakout',
}

OPEN = {
    'instrument': 'SPX500',
    'platform': None,
    'direction': 'short',
    'entry_datetime': '2024-10-12T08:30:00',
    'exit_datetime': None,
    'entry_price': 5468.0,
    'exit_price': None,
    'position_size': 2.0,
    'realized_pnl': None,
    'r_multiple': None,
    'strategy_name': None,
}


class TestBuildRows:
    """Tests for build_trade_csv_rows()."""

    def test_header_row(self):
        rows = build_trade_csv_rows([])

        assert rows == [TRADE_CSV_HEADERS]
        assert TRADE_CSV_HEADERS[0] == 'Instrument'
        assert TRADE_CSV_HEADERS[-1] == 'Strategy'

    def test_missing_values_are_empty(self):
        rows = build_trade_csv_rows([OPEN])

        assert rows[1] == [
            'SPX500', '', 'short', '2024-10-12T08:30:00', '', 5468.0, '', 2.0, '', '', ''
        ]

    def test_formatters(self):
        rows = build_trade_csv_rows(
            [CLOSED, OPEN],
            date_formatter=lambda value: value[:10],
            number_formatter=lambda value: f'{value:.2f}'
        )

        assert rows[1][3:10] == [
            '2024-10-02', '2024-10-04', '62000.00', '64850.00', '0.50', '1425.00', '2.30'
        ]
        assert rows[2][4] == ''
        assert rows[2][6] == ''


class TestRowsToCsv:
    """Tests for rows_to_csv()."""

    def test_crlf_and_quoting(self):
        text = rows_to_csv([
            ['plain', 'has,comma', 'has "quote"', 'multi\nline', None],
        ])

        assert text == 'plain,"has,comma","has ""quote""","multi\nline",\r\n'

    def test_trades_to_csv(self):
        text = trades_to_csv([CLOSED])
        lines = text.split('\r\n')

        assert lines[0] == ','.join(TRADE_CSV_HEADERS)
        assert lines[1] == (
            'BTCUSDT,Binance,long,2024-10-02T09:15:00,2024-10-04T12:45:00,'
            '62000.0,64850.0,0.5,1425.0,2.3,Support/Resistance Breakout'
        )
        assert lines[2] == ''
