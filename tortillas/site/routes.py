"""
Public Site Routes

Reservation intake plus the read-only menu and gallery feeds used by the
marketing pages.
"""

from flask import current_app, jsonify
from sqlalchemy import select

from tortillas.auth.gate import current_identity
from tortillas.models import GalleryItem, MenuCategory, MenuItem, Reservation
from tortillas.services import storage
from tortillas.site import site_bp
from tortillas.validation import json_body, optional_str, required_str


@site_bp.route('/reservations', methods=['POST'])
def create_reservation():
    """Reservation intake; linked to the account when the guest is logged in"""
    data = json_body()
    reservation = Reservation(
        name=required_str(data, 'name', 'Name', max_length=120),
        phone=required_str(data, 'phone', 'Phone', max_length=40),
        date=required_str(data, 'date', 'Date', max_length=20),
        time=required_str(data, 'time', 'Time', max_length=10),
        guests=required_str(data, 'guests', 'Number of guests', max_length=10),
        message=optional_str(data, 'message'),
    )
    identity = current_identity()
    if identity is not None:
        reservation.user_id = identity.id

    storage.save(reservation)
    current_app.logger.info('Reservation %s created for %s', reservation.id, reservation.date)
    return jsonify({'status': 'success', 'data': {'reservation': reservation.to_dict()}}), 201


@site_bp.route('/menu')
def menu():
    """Categories in display order, each with its active items"""
    categories = storage.query_all(
        select(MenuCategory).order_by(MenuCategory.order, MenuCategory.id))
    data = [
        category.to_dict(items=[item for item in category.items if item.active])
        for category in categories
    ]
    return jsonify({'status': 'success', 'data': data})


@site_bp.route('/menu/featured')
def featured_menu():
    items = storage.query_all(
        select(MenuItem)
        .where(MenuItem.featured.is_(True), MenuItem.active.is_(True))
        .order_by(MenuItem.category_id, MenuItem.order, MenuItem.id)
    )
    return jsonify({'status': 'success', 'data': [item.to_dict() for item in items]})


@site_bp.route('/gallery')
def gallery():
    items = storage.query_all(
        select(GalleryItem)
        .where(GalleryItem.active.is_(True))
        .order_by(GalleryItem.order, GalleryItem.id)
    )
    return jsonify({'status': 'success', 'data': [item.to_dict() for item in items]})
