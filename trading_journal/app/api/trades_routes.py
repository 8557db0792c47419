"""
Trades API Routes

Endpoints for the trade journal: CRUD, filtered listing, stats and CSV export.
All routes act on the authenticated user's trades only.
"""
import logging
from datetime import datetime, timezone

from flask import Blueprint, request, g, Response
from marshmallow import ValidationError

from app.api.auth_routes import login_required
from app.api.responses import success_response, error_response, validation_error_response, parse_id
from app.database import get_scoped_session
from app.services.csv_export import trades_to_csv
from app.services.trade_service import TradeService, StrategyNotFoundError
from app.validation.schemas import TradeSchema, TradeFilterSchema

logger = logging.getLogger(__name__)

trades_bp = Blueprint('trades', __name__)

trade_schema = TradeSchema()
filter_schema = TradeFilterSchema()


def _service():
    return TradeService(g.current_user.id)


def _load_filters():
    return filter_schema.load(request.args)


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


@trades_bp.route('', methods=['GET'])
@login_required
def get_trades():
    """
    GET /api/trades
    List trades.

    Query params:
        range: all|today|this-week|this-month|this-year|last-week|last-month|
               last-year|last-7|last-30|custom (default all)
        from, to: ISO dates for range=custom
        status: all|open|closed
        search: instrument or strategy name
        direction: long|short
        strategy_id: strategy id, or "none" for untagged trades
        sort: entry-desc (default)|entry-asc|pnl-desc|pnl-asc
    """
    try:
        filters = _load_filters()
        trades = _service().list_trades(filters)
    except ValidationError as e:
        return validation_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception:
        logger.exception('Failed to list trades')
        return error_response('Internal server error', 500)

    return success_response(trades)


@trades_bp.route('', methods=['POST'])
@login_required
def create_trade():
    """
    POST /api/trades
    Log a new trade.

    Request body:
    {
        "instrument": "BTCUSDT",
        "direction": "long",
        "entry_datetime": "2024-10-02T09:30:00Z",
        "entry_price": 62000,
        "position_size": 0.5,
        "exit_datetime": "2024-10-04T15:00:00Z",   (optional)
        "exit_price": 64850,                       (optional, needs exit_datetime)
        "realized_pnl": 1425,                      (optional, needs exit_datetime)
        "r_multiple": 2.3,                         (optional, needs exit_datetime)
        "platform": "Binance",                     (optional)
        "strategy_id": 1                           (optional)
    }
    """
    data = _json_body()
    if data is None:
        return error_response('No data provided', 400)

    try:
        payload = trade_schema.load(data)
        trade = _service().create_trade(payload)
    except ValidationError as e:
        return validation_error_response(e)
    except StrategyNotFoundError as e:
        return error_response(str(e), 404)
    except Exception:
        logger.exception('Failed to create trade')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    return success_response(trade.to_dict(), 201)


@trades_bp.route('/stats', methods=['GET'])
@login_required
def get_trade_stats():
    """
    GET /api/trades/stats
    Summary, monthly PnL and top instruments for the filtered trades.
    Accepts the same query params as GET /api/trades.
    """
    try:
        stats = _service().get_stats(_load_filters())
    except ValidationError as e:
        return validation_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception:
        logger.exception('Failed to compute trade stats')
        return error_response('Internal server error', 500)

    return success_response(stats)


@trades_bp.route('/export', methods=['GET'])
@login_required
def export_trades():
    """
    GET /api/trades/export
    Download the filtered trades as CSV.
    Accepts the same query params as GET /api/trades.
    """
    try:
        csv_text = trades_to_csv(_service().list_trades(_load_filters()))
    except ValidationError as e:
        return validation_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception:
        logger.exception('Failed to export trades')
        return error_response('Internal server error', 500)

    filename = f"trades-{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.csv"
    return Response(
        csv_text,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


@trades_bp.route('/<trade_id>', methods=['GET'])
@login_required
def get_trade(trade_id):
    """
    GET /api/trades/<trade_id>
    """
    trade_id = parse_id(trade_id)
    if trade_id is None:
        return error_response('Invalid trade id', 400)

    trade = _service().get_trade(trade_id)
    if trade is None:
        return error_response('Trade not found', 404)

    return success_response(trade.to_dict())


@trades_bp.route('/<trade_id>', methods=['PUT', 'PATCH'])
@login_required
def update_trade(trade_id):
    """
    PUT /api/trades/<trade_id>    full update (omitted optional fields are cleared)
    PATCH /api/trades/<trade_id>  partial update
    """
    trade_id = parse_id(trade_id)
    if trade_id is None:
        return error_response('Invalid trade id', 400)

    data = _json_body()
    if data is None:
        return error_response('No data provided', 400)

    partial = request.method == 'PATCH'
    try:
        payload = trade_schema.load(data, partial=partial)
        trade = _service().update_trade(trade_id, payload, partial=partial)
    except ValidationError as e:
        return validation_error_response(e)
    except StrategyNotFoundError as e:
        return error_response(str(e), 404)
    except Exception:
        logger.exception(f'Failed to update trade {trade_id}')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    if trade is None:
        return error_response('Trade not found', 404)

    return success_response(trade.to_dict())


@trades_bp.route('/<trade_id>', methods=['DELETE'])
@login_required
def delete_trade(trade_id):
    """
    DELETE /api/trades/<trade_id>
    """
    trade_id = parse_id(trade_id)
    if trade_id is None:
        return error_response('Invalid trade id', 400)

    try:
        deleted = _service().delete_trade(trade_id)
    except Exception:
        logger.exception(f'Failed to delete trade {trade_id}')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    if not deleted:
        return error_response('Trade not found', 404)

    return success_response({'id': trade_id}, message='Trade deleted successfully')
