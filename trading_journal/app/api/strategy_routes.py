"""
Strategy API Routes

Endpoints for managing trading strategies and their technical conditions,
plus per-strategy performance stats and the best/worst leaderboard.
"""
import logging

from flask import Blueprint, request, g
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from app.api.auth_routes import login_required
from app.api.responses import success_response, error_response, validation_error_response, parse_id
from app.database import get_scoped_session
from app.services.strategy_service import StrategyService
from app.validation.schemas import StrategySchema, StrategyFilterSchema

logger = logging.getLogger(__name__)

strategy_bp = Blueprint('strategies', __name__)

strategy_schema = StrategySchema()
strategy_filter_schema = StrategyFilterSchema()

DUPLICATE_NAME = 'Strategy with this name already exists'


def _service():
    return StrategyService(g.current_user.id)


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


@strategy_bp.route('', methods=['GET'])
@login_required
def get_strategies():
    """
    GET /api/strategies
    List the user's strategies.

    Query params:
        status: all (default)|active|archived
        search: name substring
        sort: performance-desc (default)|performance-asc|created-desc|created-asc
        include_stats: true to attach stats to each strategy
    """
    try:
        params = strategy_filter_schema.load(request.args)
        strategies = _service().list_strategies(**params)
    except ValidationError as e:
        return validation_error_response(e)
    except Exception:
        logger.exception('Failed to list strategies')
        return error_response('Internal server error', 500)

    return success_response(strategies)


@strategy_bp.route('', methods=['POST'])
@login_required
def create_strategy():
    """
    POST /api/strategies
    Create a strategy with its technical conditions.

    Request body:
    {
        "name": "Support/Resistance Breakout",
        "short_code": "BRK_H4",
        "setup_description": "Break and retest of a key level",
        "notes": "Only trade London/NY overlap",
        "is_active": true,
        "technicals": [
            {"indicator": "Volume", "timeframe": "H4", "condition": "Above 20-period average"}
        ]
    }
    """
    data = _json_body()
    if data is None:
        return error_response('No data provided', 400)

    try:
        payload = strategy_schema.load(data)
        strategy = _service().create_strategy(payload)
    except ValidationError as e:
        return validation_error_response(e)
    except IntegrityError:
        return error_response(DUPLICATE_NAME, 409)
    except Exception:
        logger.exception('Failed to create strategy')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    return success_response(strategy.to_dict(), 201)


@strategy_bp.route('/stats', methods=['GET'])
@login_required
def get_all_strategy_stats():
    """
    GET /api/strategies/stats
    Stats keyed by strategy id.
    """
    try:
        stats = _service().strategy_stats()
    except Exception:
        logger.exception('Failed to compute strategy stats')
        return error_response('Internal server error', 500)

    return success_response({str(k): v for k, v in stats.items()})


@strategy_bp.route('/leaderboard', methods=['GET'])
@login_required
def get_leaderboard():
    """
    GET /api/strategies/leaderboard
    Best and worst active strategies by total PnL.
    """
    try:
        board = _service().leaderboard()
    except Exception:
        logger.exception('Failed to build strategy leaderboard')
        return error_response('Internal server error', 500)

    return success_response(board)


@strategy_bp.route('/<strategy_id>', methods=['GET'])
@login_required
def get_strategy(strategy_id):
    """
    GET /api/strategies/<strategy_id>
    Get a strategy with its ordered technical conditions.
    """
    strategy_id = parse_id(strategy_id)
    if strategy_id is None:
        return error_response('Invalid strategy id', 400)

    strategy = _service().get_strategy(strategy_id)
    if strategy is None:
        return error_response('Strategy not found', 404)

    return success_response(strategy.to_dict())


@strategy_bp.route('/<strategy_id>/stats', methods=['GET'])
@login_required
def get_strategy_stats(strategy_id):
    """
    GET /api/strategies/<strategy_id>/stats
    """
    strategy_id = parse_id(strategy_id)
    if strategy_id is None:
        return error_response('Invalid strategy id', 400)

    stats = _service().get_strategy_stats(strategy_id)
    if stats is None:
        return error_response('Strategy not found', 404)

    return success_response(stats)


@strategy_bp.route('/<strategy_id>', methods=['PUT', 'PATCH'])
@login_required
def update_strategy(strategy_id):
    """
    PUT/PATCH /api/strategies/<strategy_id>
    Partial update; a `technicals` list replaces the existing conditions.
    """
    strategy_id = parse_id(strategy_id)
    if strategy_id is None:
        return error_response('Invalid strategy id', 400)

    data = _json_body()
    if data is None:
        return error_response('No data provided', 400)

    try:
        payload = strategy_schema.load(data, partial=True)
        strategy = _service().update_strategy(strategy_id, payload)
    except ValidationError as e:
        return validation_error_response(e)
    except IntegrityError:
        return error_response(DUPLICATE_NAME, 409)
    except Exception:
        logger.exception(f'Failed to update strategy {strategy_id}')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    if strategy is None:
        return error_response('Strategy not found', 404)

    return success_response(strategy.to_dict())


@strategy_bp.route('/<strategy_id>', methods=['DELETE'])
@login_required
def delete_strategy(strategy_id):
    """
    DELETE /api/strategies/<strategy_id>
    Trades tagged with the strategy are kept and untagged.
    """
    strategy_id = parse_id(strategy_id)
    if strategy_id is None:
        return error_response('Invalid strategy id', 400)

    try:
        deleted = _service().delete_strategy(strategy_id)
    except Exception:
        logger.exception(f'Failed to delete strategy {strategy_id}')
        get_scoped_session().rollback()
        return error_response('Internal server error', 500)

    if not deleted:
        return error_response('Strategy not found', 404)

    return success_response({'id': strategy_id}, message='Strategy deleted successfully')
