"""
Dashboard Layouts Package

Contains layout definitions for the Dash application.
"""
from dashboard.layouts.main_layout import create_main_layout

__all__ = ['create_main_layout']
