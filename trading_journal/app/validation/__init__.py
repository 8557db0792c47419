"""
Validation Package

Contains Marshmallow schemas for request validation.
"""
from app.validation.schemas import (
    LoginSchema,
    RegisterSchema,
    TradeSchema,
    TechnicalConditionSchema,
    StrategySchema,
    TradeFilterSchema,
    StrategyFilterSchema,
    check_trade_consistency,
    format_validation_error
)

__all__ = [
    'LoginSchema',
    'RegisterSchema',
    'TradeSchema',
    'TechnicalConditionSchema',
    'StrategySchema',
    'TradeFilterSchema',
    'StrategyFilterSchema',
    'check_trade_consistency',
    'format_validation_error'
]
