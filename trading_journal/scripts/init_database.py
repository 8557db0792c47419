"""
Database Initialization Script

Creates all database tables for the trading journal.

Usage:
    python scripts/init_database.py [--drop-existing] [--verify-only]

Options:
    --drop-existing       Drop existing tables before creating (WARNING: data loss)
    --verify-only         Only verify database, do not create or modify
"""
import argparse
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from app import create_app
from app.database import get_scoped_session, create_all, drop_all, get_engine
from app.models import User, Strategy, TechnicalCondition, Trade

EXPECTED_TABLES = ('users', 'strategies', 'strategy_technicals', 'trades')


def create_tables(app, drop_existing=False):
    """
    Create all database tables.

    Args:
        app: Flask application instance
        drop_existing: If True, drop existing tables first
    """
    with app.app_context():
        if drop_existing:
            print("WARNING: Dropping existing tables...")
            drop_all()
            print("Tables dropped.")

        print("Creating database tables...")
        create_all()
        print("Tables created successfully!")

        tables = inspect(get_engine()).get_table_names()
        print(f"\nTables in database: {tables}")


def verify_database(app):
    """
    Verify database is properly initialized.

    Returns:
        list: Expected tables that are missing
    """
    print("\n" + "=" * 50)
    print("Database Verification")
    print("=" * 50)

    with app.app_context():
        tables = inspect(get_engine()).get_table_names()
        missing = [table for table in EXPECTED_TABLES if table not in tables]

        print("\nTable Status:")
        for table in EXPECTED_TABLES:
            status = "MISSING" if table in missing else "OK"
            print(f"  {table}: {status}")

        if missing:
            return missing

        session = get_scoped_session()
        print("\nRecord Counts:")
        print(f"  Users: {session.query(User).count()}")
        print(f"  Strategies: {session.query(Strategy).count()}")
        print(f"  Technical conditions: {session.query(TechnicalCondition).count()}")
        print(f"  Trades: {session.query(Trade).count()}")
        return missing


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Initialize Trading Journal database'
    )
    parser.add_argument(
        '--drop-existing',
        action='store_true',
        help='Drop existing tables before creating (WARNING: data loss)'
    )
    parser.add_argument(
        '--verify-only',
        action='store_true',
        help='Only verify database, do not create or modify'
    )

    args = parser.parse_args()

    app = create_app()

    print("\n" + "=" * 60)
    print("Trading Journal - Database Initialization")
    print("=" * 60)
    print(f"Database: {app.config.get('SQLALCHEMY_DATABASE_URI', 'Not configured')}")
    print(f"Environment: {app.config.get('ENV_NAME', 'development')}")

    if not args.verify_only:
        create_tables(app, drop_existing=args.drop_existing)

    missing = verify_database(app)

    print("\n" + "=" * 60)
    print("Database initialization complete!" if not missing else "Database is missing tables")
    print("=" * 60)
    return 1 if missing else 0


if __name__ == '__main__':
    sys.exit(main())
