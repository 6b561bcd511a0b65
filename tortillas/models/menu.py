"""
Menu Models
"""

from tortillas.extensions import db
from tortillas.models.user import utcnow


class MenuCategory(db.Model):
    """Menu section such as starters or tacos"""
    __tablename__ = 'menu_categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    order = db.Column(db.Integer, default=0, nullable=False)

    items = db.relationship('MenuItem', backref='category', lazy=True,
                            cascade='all, delete-orphan',
                            order_by='MenuItem.order')

    def to_dict(self, items=None):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'order': self.order,
        }
        if items is not None:
            data['items'] = [item.to_dict() for item in items]
        return data

    def __repr__(self):
        return f'<MenuCategory {self.name}>'


class MenuItem(db.Model):
    """Dish on the menu; price is stored in cents"""
    __tablename__ = 'menu_items'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Integer, nullable=False)
    image = db.Column(db.String(500))
    category_id = db.Column(db.Integer, db.ForeignKey('menu_categories.id'),
                            nullable=False, index=True)
    spicy_level = db.Column(db.Integer, default=0, nullable=False)
    vegetarian = db.Column(db.Boolean, default=False, nullable=False)
    featured = db.Column(db.Boolean, default=False, nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'image': self.image,
            'category_id': self.category_id,
            'spicy_level': self.spicy_level,
            'vegetarian': self.vegetarian,
            'featured': self.featured,
            'order': self.order,
            'active': self.active,
        }

    def __repr__(self):
        return f'<MenuItem {self.name} {self.price}>'
