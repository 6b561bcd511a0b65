"""
Credential Store

Authoritative lookup of user records and the password hashing primitives.
Login names are normalized (stripped, lower-cased) on every path so that
"Chef1" and "chef1 " can never become two accounts.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from tortillas.errors import DuplicateLoginName
from tortillas.models import Role, User
from tortillas.services import storage

HASH_METHOD = 'scrypt'

# Pre-migration admin credentials: "<hex scrypt hash>.<salt>"
LEGACY_SCRYPT = 'legacy-scrypt'
_LEGACY_SCRYPT_PARAMS = dict(n=16384, r=8, p=1, dklen=64)


@dataclass(frozen=True)
class Credential:
    """Stored password credential: algorithm tag, salt and derived hash."""
    method: str
    salt: str
    hash: str

    @classmethod
    def parse(cls, value):
        """Parse a stored credential string. Raises ValueError if malformed."""
        if not isinstance(value, str) or not value:
            raise ValueError('empty credential')
        if '$' in value:
            method, salt, hashval = value.split('$', 2)
            if not (method and salt and hashval):
                raise ValueError('incomplete credential')
            return cls(method, salt, hashval)
        hashval, sep, salt = value.rpartition('.')
        if not (sep and hashval and salt):
            raise ValueError('unrecognised credential format')
        return cls(LEGACY_SCRYPT, salt, hashval)

    @property
    def is_legacy(self):
        return self.method == LEGACY_SCRYPT

    def __str__(self):
        if self.is_legacy:
            return f'{self.hash}.{self.salt}'
        return f'{self.method}${self.salt}${self.hash}'


def hash_password(plaintext):
    """Salted one-way hash; every call picks a fresh random salt."""
    if not plaintext:
        raise ValueError('Password must not be empty')
    return Credential.parse(generate_password_hash(plaintext, method=HASH_METHOD))


@lru_cache(maxsize=1)
def dummy_credential():
    """Credential no password matches; checked when the login name is unknown
    so that both failure paths do the same hashing work."""
    return hash_password(secrets.token_hex(32))


def verify_password(plaintext, credential):
    """Constant-time check of ``plaintext`` against a stored credential.

    Returns False for malformed or unsupported credentials instead of raising.
    """
    if not plaintext or not credential:
        return False
    try:
        if not isinstance(credential, Credential):
            credential = Credential.parse(credential)
        if credential.is_legacy:
            return _verify_legacy(plaintext, credential)
        return check_password_hash(str(credential), plaintext)
    except (ValueError, TypeError):
        return False


def _verify_legacy(plaintext, credential):
    expected = bytes.fromhex(credential.hash)
    derived = hashlib.scrypt(plaintext.encode('utf-8'),
                             salt=credential.salt.encode('utf-8'),
                             **_LEGACY_SCRYPT_PARAMS)
    return hmac.compare_digest(derived, expected)


def normalize_login_name(name):
    if not isinstance(name, str):
        return ''
    return name.strip().lower()


def find_by_login_name(name):
    login_name = normalize_login_name(name)
    if not login_name:
        return None
    return storage.query_first(select(User).where(User.username == login_name))


def find_by_id(user_id):
    return storage.get_or_none(User, user_id)


def create_user(login_name, plaintext_password, role=Role.USER):
    """Insert a new user, raising DuplicateLoginName if the name is taken."""
    login_name = normalize_login_name(login_name)
    # Fast path only; the unique index below is the real guarantee
    if find_by_login_name(login_name) is not None:
        raise DuplicateLoginName()

    user = User(username=login_name,
                password_hash=str(hash_password(plaintext_password)),
                role=role)
    try:
        storage.save(user)
    except IntegrityError as e:
        raise DuplicateLoginName() from e
    return user


def set_role(user, role):
    user.role = role
    storage.save(user)
    return user


def set_password(user, plaintext_password):
    user.password_hash = str(hash_password(plaintext_password))
    storage.save(user)
    return user
