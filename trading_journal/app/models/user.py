"""
User Model

Handles user accounts and password hashing.
"""

from sqlalchemy import Column, Integer, String, DateTime, or_, func
from sqlalchemy.orm import relationship

from app.database import Base, get_scoped_session, utcnow
from app.services.auth_service import hash_password, verify_password


class User(Base):
    """
    User account owning strategies and trades.

    Attributes:
        id: Primary key
        username: Optional unique handle (3-32 chars)
        email: Unique login email, stored lower-cased
        password_hash: Werkzeug password hash
        created_at: Account creation timestamp
    """
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(32), unique=True, nullable=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    strategies = relationship('Strategy', back_populates='user', cascade='all, delete-orphan',
                              passive_deletes=True)
    trades = relationship('Trade', back_populates='user', cascade='all, delete-orphan',
                          passive_deletes=True)

    def __repr__(self):
        return f'<User {self.id}: {self.email}>'

    def set_password(self, password):
        self.password_hash = hash_password(password)

    def check_password(self, password):
        return verify_password(password, self.password_hash)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def get_by_id(cls, user_id):
        session = get_scoped_session()
        return session.get(cls, int(user_id))

    @classmethod
    def get_by_email(cls, email):
        session = get_scoped_session()
        return session.query(cls).filter(func.lower(cls.email) == email.strip().lower()).first()

    @classmethod
    def get_by_username(cls, username):
        session = get_scoped_session()
        return session.query(cls).filter_by(username=username).first()

    @classmethod
    def get_by_identifier(cls, identifier):
        """Look a user up by email or username."""
        identifier = identifier.strip()
        session = get_scoped_session()
        return session.query(cls).filter(
            or_(func.lower(cls.email) == identifier.lower(), cls.username == identifier)
        ).first()

    @classmethod
    def create(cls, email, password, username=None):
        session = get_scoped_session()
        user = cls(email=email.strip().lower(), username=username)
        user.set_password(password)
        session.add(user)
        session.commit()
        return user

    @classmethod
    def verify(cls, identifier, password):
        """Return the user when the credentials match, else None."""
        user = cls.get_by_identifier(identifier)
        if user and user.check_password(password):
            return user
        return None
