"""
Seed Runner

Runs one or more seed scripts against the seed user.

Usage:
    python scripts/seed.py [all|trades|strategies ...]

Options may be given with or without a leading "--". With no options only
trades are seeded. Strategies always run before trades so the demo trades can
be linked to them.
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from scripts.seed_user import get_or_create_seed_user
from scripts.seed_strategies import seed_strategies
from scripts.seed_trades import seed_trades

SEED_ORDER = ('strategies', 'trades')

OPTION_TO_SEEDS = {
    'trades': ('trades',),
    'strategies': ('strategies',),
    'all': SEED_ORDER,
}

SEED_FUNCTIONS = {
    'strategies': seed_strategies,
    'trades': seed_trades,
}


def build_parser():
    parser = argparse.ArgumentParser(description='Seed the trading journal with demo data')
    parser.add_argument(
        'seeds',
        nargs='*',
        metavar='SEED',
        help='all, trades or strategies (default: trades)'
    )
    for option in OPTION_TO_SEEDS:
        parser.add_argument(
            f'--{option}',
            dest='flags',
            action='append_const',
            const=option,
            help=f'Same as "{option}"'
        )
    return parser


def resolve_seeds(argv=None):
    """
    Parse the command line into the seeds to run, in run order.

    Exits with status 2 on an unknown option.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    selected = set()
    for option in list(args.seeds) + (args.flags or []):
        if option not in OPTION_TO_SEEDS:
            parser.error(f'Unknown seed option "{option}". Use all, trades, or strategies.')
        selected.update(OPTION_TO_SEEDS[option])

    if not selected:
        selected.add('trades')
    return [seed for seed in SEED_ORDER if seed in selected]


def run_seeds(seeds, user_id):
    for seed in seeds:
        SEED_FUNCTIONS[seed](user_id)


def main(argv=None):
    seeds = resolve_seeds(argv)

    app = create_app()
    with app.app_context():
        user = get_or_create_seed_user()
        print(f"\nRunning seed(s): {', '.join(seeds)} for {user.email}")
        try:
            run_seeds(seeds, user.id)
        except Exception as e:
            print(f"\nSeed run failed: {e}", file=sys.stderr)
            return 1

    print("\nSeed run complete")
    return 0


if __name__ == '__main__':
    sys.exit(main())
