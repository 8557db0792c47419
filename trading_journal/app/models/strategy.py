"""
Strategy Model

A user-defined trading playbook with an ordered checklist of technical conditions.
"""

from sqlalchemy import (
    Column, Integer, String, SmallInteger, DateTime, Text, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.database import Base, get_scoped_session, utcnow


class Strategy(Base):
    """
    Represents a user's trading strategy.

    Attributes:
        id: Primary key
        user_id: Owning user
        name: Display name (unique per user)
        short_code: Optional short label, e.g. "BRK_H4"
        setup_description: How the setup is traded
        notes: Free-text notes
        is_active: Archive flag (1=active, 0=archived)
        archived_reason: Why the strategy was archived
        created_at: Record creation timestamp
        technicals: Technical conditions ordered by display_order
    """
    __tablename__ = 'strategies'
    __table_args__ = (
        UniqueConstraint('user_id', 'name', name='uq_strategies_user_name'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    short_code = Column(String(20))
    setup_description = Column(Text)
    notes = Column(Text)
    is_active = Column(SmallInteger, nullable=False, default=1)
    archived_reason = Column(String(255))
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship('User', back_populates='strategies')
    technicals = relationship(
        'TechnicalCondition',
        back_populates='strategy',
        order_by='TechnicalCondition.display_order',
        cascade='all, delete-orphan',
        passive_deletes=True
    )
    trades = relationship('Trade', back_populates='strategy', passive_deletes=True)

    def __repr__(self):
        return f'<Strategy {self.user_id}/{self.name}>'

    def to_dict(self, include_technicals=True):
        """Convert model to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'short_code': self.short_code,
            'setup_description': self.setup_description,
            'notes': self.notes,
            'is_active': bool(self.is_active),
            'archived_reason': self.archived_reason,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
        if include_technicals:
            data['technicals'] = [t.to_dict() for t in self.technicals]
        return data

    @classmethod
    def query_for_user(cls, user_id):
        """Base query scoped to one owner."""
        session = get_scoped_session()
        return session.query(cls).filter(cls.user_id == user_id)

    @classmethod
    def get_for_user(cls, strategy_id, user_id):
        return cls.query_for_user(user_id).filter(cls.id == strategy_id).first()
