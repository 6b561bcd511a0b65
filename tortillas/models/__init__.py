"""
Models Package

Exports all models for easy importing.
"""

from tortillas.models.user import User, Role
from tortillas.models.session import SessionRecord
from tortillas.models.reservation import Reservation, ReservationStatus
from tortillas.models.menu import MenuCategory, MenuItem
from tortillas.models.gallery import GalleryItem

__all__ = [
    'User',
    'Role',
    'SessionRecord',
    'Reservation',
    'ReservationStatus',
    'MenuCategory',
    'MenuItem',
    'GalleryItem',
]
