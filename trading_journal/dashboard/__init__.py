"""
Dashboard Package

Contains Dash application and UI components for the trading journal.
"""
from dashboard.app import create_dash_app

__all__ = ['create_dash_app']
