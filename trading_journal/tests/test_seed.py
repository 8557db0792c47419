"""
Seed Script Tests

Option parsing and the deterministic demo data.
"""
import pytest

from app.database import close_session
from app.models import User
from app.services.strategy_service import StrategyService
from app.services.trade_service import TradeService
from scripts.seed import resolve_seeds
from scripts.seed_strategies import seed_strategies
from scripts.seed_trades import seed_trades
from scripts.seed_user import get_or_create_seed_user, DEFAULT_SEED_EMAIL


class TestResolveSeeds:
    """Tests for seed option parsing."""

    def test_default_is_trades(self):
        assert resolve_seeds([]) == ['trades']

    @pytest.mark.parametrize('argv, expected', [
        (['trades'], ['trades']),
        (['--trades'], ['trades']),
        (['strategies'], ['strategies']),
        (['--strategies'], ['strategies']),
        (['all'], ['strategies', 'trades']),
        (['--all'], ['strategies', 'trades']),
        (['trades', '--strategies'], ['strategies', 'trades']),
    ])
    def test_options(self, argv, expected):
        assert resolve_seeds(argv) == expected

    @pytest.mark.parametrize('argv', [['users'], ['--users']])
    def test_unknown_option_exits(self, argv):
        with pytest.raises(SystemExit) as exc:
            resolve_seeds(argv)

        assert exc.value.code != 0


class TestSeedUser:
    """Tests for the seed account."""

    def test_created_once(self, monkeypatch):
        monkeypatch.delenv('SEED_USER_EMAIL', raising=False)
        monkeypatch.delenv('SEED_USER_PASSWORD', raising=False)

        first = get_or_create_seed_user()
        second = get_or_create_seed_user()

        assert first.id == second.id
        assert first.email == DEFAULT_SEED_EMAIL
        assert User.verify(DEFAULT_SEED_EMAIL, 'password123') is not None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv('SEED_USER_EMAIL', 'seed@example.com')
        monkeypatch.setenv('SEED_USER_PASSWORD', 'another-pass')

        user = get_or_create_seed_user()

        assert user.email == 'seed@example.com'
        assert User.verify('seed@example.com', 'another-pass') is not None


class TestSeedData:
    """Tests for the seeded strategies and trades."""

    def test_seed_strategies(self):
        user_id = get_or_create_seed_user().id

        seed_strategies(user_id)
        close_session()

        strategies = StrategyService(user_id).list_strategies(sort='created-asc')
        assert [s['name'] for s in strategies] == [
            'Elliott Wave Reversal', 'Support/Resistance Breakout', 'RSI Divergence Scalp'
        ]
        assert [s['short_code'] for s in strategies] == ['REV_1D', 'BRK_H4', 'SCAL_M15']
        assert [s['is_active'] for s in strategies] == [True, True, False]
        assert [t['indicator'] for t in strategies[0]['technicals']] == ['Elliott Wave', 'RSI', 'Volume']
        assert strategies[0]['technicals'][2]['is_required'] is False

    def test_seed_trades_links_strategies(self):
        user_id = get_or_create_seed_user().id
        seed_strategies(user_id)

        seed_trades(user_id)
        close_session()

        trades = TradeService(user_id).get_all_trades()
        by_instrument = {t['instrument']: t for t in trades}
        assert [t['instrument'] for t in trades] == ['SPX500', 'AAPL', 'ETHUSDT', 'BTCUSDT']
        assert by_instrument['BTCUSDT']['strategy_name'] == 'Support/Resistance Breakout'
        assert by_instrument['ETHUSDT']['strategy_name'] == 'Support/Resistance Breakout'
        assert by_instrument['AAPL']['strategy_name'] is None
        assert by_instrument['SPX500']['strategy_name'] == 'Elliott Wave Reversal'
        assert by_instrument['SPX500']['is_open'] is True
        assert by_instrument['AAPL']['realized_pnl'] == -1100

    def test_seed_trades_without_strategies(self):
        user_id = get_or_create_seed_user().id

        seed_trades(user_id)
        close_session()

        trades = TradeService(user_id).get_all_trades()
        assert len(trades) == 4
        assert all(t['strategy_id'] is None for t in trades)

    def test_reseeding_is_idempotent(self):
        user_id = get_or_create_seed_user().id

        for _ in range(2):
            seed_strategies(user_id)
            seed_trades(user_id)
        close_session()

        assert len(TradeService(user_id).get_all_trades()) == 4
        assert len(StrategyService(user_id).list_strategies()) == 3

    def test_reseeding_strategies_detaches_trades(self):
        user_id = get_or_create_seed_user().id
        seed_strategies(user_id)
        seed_trades(user_id)

        seed_strategies(user_id)
        close_session()

        trades = TradeService(user_id).get_all_trades()
        assert len(trades) == 4
        assert all(t['strategy_id'] is None for t in trades)
