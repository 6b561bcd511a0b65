"""
Reservation Model
"""

import enum

from tortillas.extensions import db
from tortillas.models.user import utcnow


class ReservationStatus(str, enum.Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class Reservation(db.Model):
    """Table booking submitted through the public site"""
    __tablename__ = 'reservations'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40), nullable=False)
    date = db.Column(db.String(20), nullable=False)
    time = db.Column(db.String(10), nullable=False)
    guests = db.Column(db.String(10), nullable=False)
    message = db.Column(db.Text)
    status = db.Column(
        db.Enum(ReservationStatus, native_enum=False, length=16,
                values_callable=lambda statuses: [s.value for s in statuses]),
        default=ReservationStatus.PENDING, nullable=False,
    )
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'date': self.date,
            'time': self.time,
            'guests': self.guests,
            'message': self.message,
            'status': self.status.value,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Reservation {self.name} {self.date} {self.time} ({self.status.value})>'
