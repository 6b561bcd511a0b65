"""
Auth Routes

JSON login/registration/logout endpoints backed by the Auth Gate.
"""

from flask import jsonify
from sqlalchemy import select

from tortillas.auth import auth_bp, gate
from tortillas.auth.decorators import login_required
from tortillas.errors import Unauthenticated
from tortillas.models import Reservation
from tortillas.services import storage
from tortillas.validation import json_body


def _login_name(data):
    # The SPA posts `username`; `loginName` is accepted as an alias
    return data.get('username', data.get('loginName'))


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and log it in"""
    data = json_body()
    identity = gate.register(_login_name(data), data.get('password'))
    return jsonify({'status': 'success', 'data': identity.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login route"""
    data = json_body()
    identity = gate.login(_login_name(data), data.get('password'))
    return jsonify({'status': 'success', 'data': identity.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """User logout route; succeeds whether or not anyone was logged in"""
    gate.logout()
    return jsonify({'status': 'success', 'message': 'Logged out successfully'})


@auth_bp.route('/user')
@auth_bp.route('/currentUser')
def current_user():
    identity = gate.current_identity()
    if identity is None:
        raise Unauthenticated()
    return jsonify({'status': 'success', 'data': identity.to_dict()})


@auth_bp.route('/my-reservations')
@login_required
def my_reservations():
    """Reservations made while logged in, newest first"""
    identity = gate.current_identity()
    reservations = storage.query_all(
        select(Reservation)
        .where(Reservation.user_id == identity.id)
        .order_by(Reservation.created_at.desc(), Reservation.id.desc())
    )
    return jsonify({'status': 'success', 'data': [r.to_dict() for r in reservations]})
