# medconnect/security.py
from datetime import datetime, timedelta

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.hash import bcrypt

from . import config

MALFORMED = "Malformed"
EXPIRED = "Expired"
SIGNATURE_INVALID = "SignatureInvalid"


class TokenError(Exception):
    """Token rejected; ``kind`` is one of MALFORMED, EXPIRED, SIGNATURE_INVALID."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(kind)


def hash_password(plaintext: str) -> str:
    return bcrypt.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
    try:
        return bcrypt.verify(plaintext, hashed)
    except (ValueError, TypeError):
        return False


def issue_token(user_id: int) -> str:
    expire = datetime.utcnow() + timedelta(days=config.JWT_EXPIRE_DAYS)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_token(token: str) -> int:
    """Return the user id carried by ``token`` or raise TokenError."""
    try:
        jwt.get_unverified_header(token)
    except JWTError:
        raise TokenError(MALFORMED)

    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenError(EXPIRED)
    except JWTError:
        raise TokenError(SIGNATURE_INVALID)

    try:
        return int(payload.get("sub"))
    except (ValueError, TypeError):
        raise TokenError(MALFORMED)
