import hmac
import random
import uuid

import bcrypt

from soc_portal.core.config import settings


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def is_password_hashed(stored: str) -> bool:
    """Legacy rows store plaintext; bcrypt hashes carry a $2a/$2b/$2y prefix"""
    return bool(stored) and stored.startswith(("$2a$", "$2b$", "$2y$"))


def check_password(plain_password: str, stored: str) -> bool:
    """Verify against a bcrypt hash, or a legacy plaintext value"""
    if is_password_hashed(stored):
        return verify_password(plain_password, stored)
    return bool(stored) and hmac.compare_digest(plain_password.encode("utf-8"), stored.encode("utf-8"))


def generate_session_id() -> str:
    """Opaque session token"""
    return str(uuid.uuid4())


def generate_eid() -> str:
    """Correlation id carried in the `eid` cookie, e.g. SOC-482913"""
    return f"SOC-{random.randint(100000, 999999)}"
