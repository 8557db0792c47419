"""
Scripts Package

Contains utility scripts for:
- Database initialization (init_database.py)
- Demo data seeding (seed.py, seed_strategies.py, seed_trades.py)
"""
