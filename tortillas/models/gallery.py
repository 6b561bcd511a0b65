"""
Gallery Model
"""

from tortillas.extensions import db
from tortillas.models.user import utcnow


class GalleryItem(db.Model):
    __tablename__ = 'gallery_items'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    src = db.Column(db.String(500), nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'src': self.src,
            'order': self.order,
            'active': self.active,
        }

    def __repr__(self):
        return f'<GalleryItem {self.title}>'
