"""
Health Check API Routes

Endpoints for system health monitoring.
"""
import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.database import get_scoped_session

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


def _database_ok():
    try:
        get_scoped_session().execute(text('SELECT 1'))
        return True
    except SQLAlchemyError:
        logger.exception('Database health check failed')
        return False


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    GET /api/health
    Returns system health status.
    """
    database_ok = _database_ok()
    return jsonify({
        'success': True,
        'data': {
            'status': 'ok' if database_ok else 'degraded',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'components': {'database': 'ok' if database_ok else 'error'}
        }
    })


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """
    GET /api/ready
    Kubernetes-style readiness check.
    """
    if _database_ok():
        return jsonify({'ready': True}), 200
    return jsonify({'ready': False}), 503


@health_bp.route('/live', methods=['GET'])
def liveness_check():
    """
    GET /api/live
    Kubernetes-style liveness check.
    """
    return jsonify({'alive': True}), 200
