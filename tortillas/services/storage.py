"""
Persistence helpers shared by services and routes.

Any failure reaching the database is rolled back and surfaced as
``StorageError``; nothing here retries.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from tortillas.errors import StorageError
from tortillas.extensions import db


def commit():
    """Commit the current unit of work.

    ``IntegrityError`` is re-raised untouched (after rollback) so callers
    can translate constraint violations into domain errors.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError() from e


def save(obj):
    db.session.add(obj)
    commit()
    return obj


def delete(obj):
    db.session.delete(obj)
    commit()


def get_or_none(model, ident):
    try:
        return db.session.get(model, ident)
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError() from e


def query_all(statement):
    try:
        return db.session.execute(statement).scalars().all()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError() from e


def query_first(statement):
    try:
        return db.session.execute(statement).scalars().first()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError() from e
