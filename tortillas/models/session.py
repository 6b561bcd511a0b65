"""
Session Model
"""

from tortillas.extensions import db
from tortillas.models.user import utcnow


class SessionRecord(db.Model):
    """Server-side session referenced by the opaque id in the session cookie"""
    __tablename__ = 'sessions'

    sid = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def __repr__(self):
        return f'<SessionRecord {self.sid[:8]}... expires {self.expires_at}>'
