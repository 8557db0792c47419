"""
Technical Condition Model

One checklist item on a strategy (indicator, timeframe, condition text).
"""
from sqlalchemy import Column, Integer, String, SmallInteger, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class TechnicalCondition(Base):
    """
    Attributes:
        id: Primary key
        strategy_id: Owning strategy
        indicator: Indicator name, e.g. "RSI"
        timeframe: Optional timeframe label, e.g. "H4"
        condition: Condition text
        display_order: Presentation order within the strategy
        is_required: 1 if the condition must hold, 0 if optional
    """
    __tablename__ = 'strategy_technicals'

    id = Column(Integer, primary_key=True, autoincrement=True)
    strategy_id = Column(Integer, ForeignKey('strategies.id', ondelete='CASCADE'),
                         nullable=False, index=True)
    indicator = Column(String(100), nullable=False)
    timeframe = Column(String(20))
    condition = Column(Text, nullable=False)
    display_order = Column(Integer, nullable=False, default=0)
    is_required = Column(SmallInteger, nullable=False, default=1)

    strategy = relationship('Strategy', back_populates='technicals')

    def __repr__(self):
        return f'<TechnicalCondition {self.strategy_id}#{self.display_order} {self.indicator}>'

    def to_dict(self):
        return {
            'id': self.id,
            'strategy_id': self.strategy_id,
            'indicator': self.indicator,
            'timeframe': self.timeframe,
            'condition': self.condition,
            'display_order': self.display_order,
            'is_required': bool(self.is_required)
        }
