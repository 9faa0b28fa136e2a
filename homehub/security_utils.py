"""
Password hashing helpers
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# pbkdf2_sha256 is implemented by passlib itself, no native backend needed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against its stored hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False
