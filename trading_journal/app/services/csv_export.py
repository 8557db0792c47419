"""
CSV Export

Builds the trade export table and serializes it as RFC-4180 text.
"""
import csv
import io

TRADE_CSV_HEADERS = [
    'Instrument',
    'Platform',
    'Direction',
    'Entry Date',
    'Exit Date',
    'Entry Price',
    'Exit Price',
    'Position Size',
    'Realized PnL',
    'R Multiple',
    'Strategy'
]


def _identity(value):
    return value


def build_trade_csv_rows(trades, date_formatter=None, number_formatter=None):
    """
    Header row plus one row per trade dict.

    Args:
        trades: Trade dicts (Trade.to_dict() shape)
        date_formatter: Optional callable applied to entry/exit datetimes
        number_formatter: Optional callable applied to numeric cells

    Missing optional values become empty cells.
    """
    fmt_date = date_formatter or _identity
    fmt_number = number_formatter or _identity

    def optional(value, formatter):
        return formatter(value) if value is not None else ''

    rows = [list(TRADE_CSV_HEADERS)]
    for trade in trades:
        rows.append([
            trade.get('instrument'),
            trade.get('platform') or '',
            trade.get('direction'),
            fmt_date(trade.get('entry_datetime')),
            fmt_date(trade['exit_datetime']) if trade.get('exit_datetime') else '',
            fmt_number(trade.get('entry_price')),
            optional(trade.get('exit_price'), fmt_number),
            fmt_number(trade.get('position_size')),
            optional(trade.get('realized_pnl'), fmt_number),
            optional(trade.get('r_multiple'), fmt_number),
            trade.get('strategy_name') or ''
        ])
    return rows


def rows_to_csv(rows):
    """
    Serialize rows to CSV text.

    Cells containing a comma, quote or newline are quoted with embedded
    quotes doubled; None becomes an empty cell. Rows end with CRLF.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\r\n')
    for row in rows:
        writer.writerow(['' if cell is None else cell for cell in row])
    return buffer.getvalue()


def trades_to_csv(trades):
    """Convenience wrapper used by the export endpoint and dashboard download."""
    return rows_to_csv(build_trade_csv_rows(trades))
