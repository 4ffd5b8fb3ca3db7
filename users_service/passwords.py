"""bcrypt helpers.

Both functions are CPU bound; async callers run them through
``asyncio.to_thread`` so that hashing never stalls the event loop.
"""
import logging

import bcrypt

from users_service.config import settings

logger = logging.getLogger(__name__)

# bcrypt only consumes the first 72 bytes of its input and current releases
# refuse anything longer.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode()) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int | None = None) -> str:
    if password_too_long(password):
        raise ValueError(f"password is longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Return True when *plain_password* matches *hashed_password*.

    ``bcrypt.checkpw`` re-derives the hash with the stored salt and compares
    in constant time.  A password that could never have been hashed cannot
    match, and neither can a stored value that is not a bcrypt hash; both
    are reported as a mismatch rather than an error.
    """
    if password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False
