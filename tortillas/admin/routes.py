"""
Admin Routes

Menu, gallery and reservation management for administrators.
"""

from flask import current_app, jsonify
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from tortillas.admin import admin_bp
from tortillas.auth.decorators import admin_required
from tortillas.errors import NotFound, ValidationError
from tortillas.models import (
    GalleryItem,
    MenuCategory,
    MenuItem,
    Reservation,
    ReservationStatus,
    User,
)
from tortillas.services import storage
from tortillas.validation import (
    json_body,
    optional_bool,
    optional_int,
    optional_str,
    required_int,
    required_str,
)


def _get_or_404(model, ident, label):
    obj = storage.get_or_none(model, ident)
    if obj is None:
        raise NotFound(f'{label} not found.')
    return obj


def _count(statement):
    return storage.query_first(statement) or 0


def _ok(data, status_code=200):
    return jsonify({'status': 'success', 'data': data}), status_code


def _save_category(category):
    # Rollback expires the instance, so read the name first
    name = category.name
    try:
        storage.save(category)
    except IntegrityError:
        raise ValidationError(f'A category named "{name}" already exists.')


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

@admin_bp.route('/stats')
@admin_required
def admin_stats():
    """Counts for the admin dashboard overview."""
    return _ok({
        'users': _count(select(func.count(User.id))),
        'reservations': _count(select(func.count(Reservation.id))),
        'pending_reservations': _count(
            select(func.count(Reservation.id))
            .where(Reservation.status == ReservationStatus.PENDING)),
        'menu_categories': _count(select(func.count(MenuCategory.id))),
        'menu_items': _count(select(func.count(MenuItem.id))),
        'gallery_items': _count(select(func.count(GalleryItem.id))),
    })


# -----------------------------------------------------------------------------
# Menu categories
# -----------------------------------------------------------------------------

@admin_bp.route('/menu/categories', methods=['GET'])
@admin_required
def list_categories():
    categories = storage.query_all(
        select(MenuCategory).order_by(MenuCategory.order, MenuCategory.id))
    return _ok([c.to_dict() for c in categories])


@admin_bp.route('/menu/categories', methods=['POST'])
@admin_required
def create_category():
    data = json_body()
    category = MenuCategory(
        name=required_str(data, 'name', 'Category name', max_length=100),
        description=optional_str(data, 'description'),
        order=optional_int(data, 'order', default=0),
    )
    _save_category(category)
    current_app.logger.info('Menu category "%s" created', category.name)
    return _ok(category.to_dict(), 201)


@admin_bp.route('/menu/categories/<int:category_id>', methods=['PUT'])
@admin_required
def update_category(category_id):
    category = _get_or_404(MenuCategory, category_id, 'Category')
    data = json_body()
    if 'name' in data:
        category.name = required_str(data, 'name', 'Category name', max_length=100)
    if 'description' in data:
        category.description = optional_str(data, 'description')
    if 'order' in data:
        category.order = optional_int(data, 'order', default=0)
    _save_category(category)
    return _ok(category.to_dict())


@admin_bp.route('/menu/categories/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    """Delete a category and all of its menu items."""
    category = _get_or_404(MenuCategory, category_id, 'Category')
    name = category.name
    storage.delete(category)
    current_app.logger.info('Menu category "%s" deleted', name)
    return jsonify({'status': 'success', 'message': f'Category "{name}" deleted.'})


# -----------------------------------------------------------------------------
# Menu items
# -----------------------------------------------------------------------------

def _apply_menu_item_fields(item, data, partial):
    if not partial or 'name' in data:
        item.name = required_str(data, 'name', 'Item name', max_length=120)
    if not partial or 'description' in data:
        item.description = required_str(data, 'description', 'Description')
    if not partial or 'price' in data:
        item.price = required_int(data, 'price', minimum=0)
    if not partial or 'category_id' in data:
        category_id = required_int(data, 'category_id')
        if storage.get_or_none(MenuCategory, category_id) is None:
            raise ValidationError('Category does not exist.')
        item.category_id = category_id
    if 'image' in data:
        item.image = optional_str(data, 'image')
    if 'spicy_level' in data:
        item.spicy_level = optional_int(data, 'spicy_level', default=0, minimum=0)
    if 'vegetarian' in data:
        item.vegetarian = optional_bool(data, 'vegetarian', default=False)
    if 'featured' in data:
        item.featured = optional_bool(data, 'featured', default=False)
    if 'order' in data:
        item.order = optional_int(data, 'order', default=0)
    if 'active' in data:
        item.active = optional_bool(data, 'active', default=True)


@admin_bp.route('/menu/items', methods=['GET'])
@admin_required
def list_menu_items():
    items = storage.query_all(
        select(MenuItem).order_by(MenuItem.category_id, MenuItem.order, MenuItem.id))
    return _ok([item.to_dict() for item in items])


@admin_bp.route('/menu/items', methods=['POST'])
@admin_required
def create_menu_item():
    item = MenuItem()
    _apply_menu_item_fields(item, json_body(), partial=False)
    storage.save(item)
    current_app.logger.info('Menu item "%s" created', item.name)
    return _ok(item.to_dict(), 201)


@admin_bp.route('/menu/items/<int:item_id>', methods=['PUT'])
@admin_required
def update_menu_item(item_id):
    item = _get_or_404(MenuItem, item_id, 'Menu item')
    _apply_menu_item_fields(item, json_body(), partial=True)
    storage.save(item)
    return _ok(item.to_dict())


@admin_bp.route('/menu/items/<int:item_id>', methods=['DELETE'])
@admin_required
def delete_menu_item(item_id):
    item = _get_or_404(MenuItem, item_id, 'Menu item')
    storage.delete(item)
    return jsonify({'status': 'success', 'message': 'Menu item deleted.'})


# -----------------------------------------------------------------------------
# Gallery
# -----------------------------------------------------------------------------

@admin_bp.route('/gallery', methods=['GET'])
@admin_required
def list_gallery():
    items = storage.query_all(select(GalleryItem).order_by(GalleryItem.order, GalleryItem.id))
    return _ok([item.to_dict() for item in items])


@admin_bp.route('/gallery', methods=['POST'])
@admin_required
def create_gallery_item():
    data = json_body()
    item = GalleryItem(
        title=required_str(data, 'title', 'Title', max_length=120),
        src=required_str(data, 'src', 'Image source', max_length=500),
        description=optional_str(data, 'description'),
        order=optional_int(data, 'order', default=0),
        active=optional_bool(data, 'active', default=True),
    )
    storage.save(item)
    return _ok(item.to_dict(), 201)


@admin_bp.route('/gallery/<int:item_id>', methods=['PUT'])
@admin_required
def update_gallery_item(item_id):
    item = _get_or_404(GalleryItem, item_id, 'Gallery item')
    data = json_body()
    if 'title' in data:
        item.title = required_str(data, 'title', 'Title', max_length=120)
    if 'src' in data:
        item.src = required_str(data, 'src', 'Image source', max_length=500)
    if 'description' in data:
        item.description = optional_str(data, 'description')
    if 'order' in data:
        item.order = optional_int(data, 'order', default=0)
    if 'active' in data:
        item.active = optional_bool(data, 'active', default=True)
    storage.save(item)
    return _ok(item.to_dict())


@admin_bp.route('/gallery/<int:item_id>', methods=['DELETE'])
@admin_required
def delete_gallery_item(item_id):
    item = _get_or_404(GalleryItem, item_id, 'Gallery item')
    storage.delete(item)
    return jsonify({'status': 'success', 'message': 'Gallery item deleted.'})


# -----------------------------------------------------------------------------
# Reservations
# -----------------------------------------------------------------------------

@admin_bp.route('/reservations', methods=['GET'])
@admin_required
def list_reservations():
    reservations = storage.query_all(
        select(Reservation).order_by(Reservation.created_at.desc(), Reservation.id.desc()))
    return _ok([r.to_dict() for r in reservations])


@admin_bp.route('/reservations/<int:reservation_id>/status', methods=['PUT'])
@admin_required
def update_reservation_status(reservation_id):
    reservation = _get_or_404(Reservation, reservation_id, 'Reservation')
    raw = required_str(json_body(), 'status', 'Status')
    try:
        status = ReservationStatus(raw.lower())
    except ValueError:
        allowed = ', '.join(s.value for s in ReservationStatus)
        raise ValidationError(f'Status must be one of: {allowed}.')

    reservation.status = status
    storage.save(reservation)
    current_app.logger.info('Reservation %s marked %s', reservation.id, status.value)
    return _ok(reservation.to_dict())
