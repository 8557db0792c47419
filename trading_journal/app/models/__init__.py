"""
SQLAlchemy Models for Trading Journal

This module exports all database models for easy importing:
    from app.models import User, Strategy, TechnicalCondition, Trade
"""
from app.models.user import User
from app.models.strategy import Strategy
from app.models.technical_condition import TechnicalCondition
from app.models.trade import Trade

__all__ = [
    'User',
    'Strategy',
    'TechnicalCondition',
    'Trade'
]
