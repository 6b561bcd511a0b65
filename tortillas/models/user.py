"""
User Model
"""

import enum
from datetime import datetime, timezone

from flask_login import UserMixin

from tortillas.extensions import db


def utcnow():
    """Naive UTC timestamp, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, enum.Enum):
    USER = 'user'
    ADMIN = 'admin'


class User(UserMixin, db.Model):
    """Account holder; the password is only ever stored as a credential string."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    # The unique index is what makes concurrent registrations race-safe
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(Role, native_enum=False, length=16,
                values_callable=lambda roles: [r.value for r in roles]),
        default=Role.USER, nullable=False,
    )
    created_at = db.Column(db.DateTime, default=utcnow)

    reservations = db.relationship('Reservation', backref='user', lazy=True)

    @property
    def is_admin(self):
        return self.role is Role.ADMIN

    def __repr__(self):
        return f'<User {self.username} ({self.role.value})>'
