"""
Trade Model

One logged position. A trade is open until it has an exit datetime.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship, joinedload

from app.database import Base, get_scoped_session, utcnow


def _to_float(value):
    return float(value) if value is not None else None


class Trade(Base):
    """
    Represents a journaled trade.

    Attributes:
        id: Primary key
        user_id: Owning user
        strategy_id: Optional strategy tag (nulled when the strategy is deleted)
        instrument: Instrument symbol, e.g. "BTCUSDT"
        direction: 'long' or 'short'
        entry_datetime: When the position was opened
        exit_datetime: When it was closed (None while open)
        entry_price: Entry fill price
        exit_price: Exit fill price
        position_size: Units traded
        realized_pnl: Realized profit/loss
        r_multiple: PnL as a multiple of initial risk
        platform: Broker/exchange label
        created_at: Record creation timestamp
    """
    __tablename__ = 'trades'

    DIRECTIONS = ('long', 'short')

    # Fields that only make sense on a closed trade
    EXIT_FIELDS = ('exit_price', 'realized_pnl', 'r_multiple')

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    strategy_id = Column(Integer, ForeignKey('strategies.id', ondelete='SET NULL'),
                         nullable=True, index=True)
    instrument = Column(String(50), nullable=False)
    direction = Column(String(5), nullable=False)
    entry_datetime = Column(DateTime, nullable=False)
    exit_datetime = Column(DateTime, nullable=True)
    entry_price = Column(Numeric(20, 8), nullable=False)
    exit_price = Column(Numeric(20, 8), nullable=True)
    position_size = Column(Numeric(20, 8), nullable=False)
    realized_pnl = Column(Numeric(18, 4), nullable=True)
    r_multiple = Column(Numeric(10, 4), nullable=True)
    platform = Column(String(60), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship('User', back_populates='trades')
    strategy = relationship('Strategy', back_populates='trades')

    def __repr__(self):
        return f'<Trade {self.id}: {self.direction} {self.position_size} {self.instrument} @ {self.entry_price}>'

    @property
    def is_open(self):
        return self.exit_datetime is None

    def to_dict(self):
        """Convert model to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'strategy_id': self.strategy_id,
            'strategy_name': self.strategy.name if self.strategy else None,
            'instrument': self.instrument,
            'direction': self.direction,
            'entry_datetime': self.entry_datetime.isoformat() if self.entry_datetime else None,
            'exit_datetime': self.exit_datetime.isoformat() if self.exit_datetime else None,
            'entry_price': _to_float(self.entry_price),
            'exit_price': _to_float(self.exit_price),
            'position_size': _to_float(self.position_size),
            'realized_pnl': _to_float(self.realized_pnl),
            'r_multiple': _to_float(self.r_multiple),
            'platform': self.platform,
            'is_open': self.is_open,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def query_for_user(cls, user_id):
        """Owner-scoped query with the strategy eagerly loaded."""
        session = get_scoped_session()
        return session.query(cls).options(joinedload(cls.strategy)).filter(cls.user_id == user_id)

    @classmethod
    def get_for_user(cls, trade_id, user_id):
        return cls.query_for_user(user_id).filter(cls.id == trade_id).first()

    @classmethod
    def get_user_trades(cls, user_id):
        """All trades for a user, newest entry first."""
        return cls.query_for_user(user_id).order_by(cls.entry_datetime.desc(), cls.id.desc()).all()
