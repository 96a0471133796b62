# medconnect/services/accounts.py
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..errors import ConsistencyError, DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from ..security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _find_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def register(
    db: Session,
    name: str,
    email: str,
    password: str,
    is_doctor: bool = False,
    phone_number: str = "",
) -> Tuple[models.User, str]:
    name, email = _clean(name), _clean(email).lower()
    if not name or not email or not password:
        raise ValidationError("Please provide name, email and password")

    if _find_by_email(db, email):
        raise DuplicateEmail()

    user = models.User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        phone_number=_clean(phone_number),
        is_doctor=bool(is_doctor),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()

    if user.id is None:
        raise ConsistencyError()

    # diagnostic only: a committed insert is trusted even if this read misses
    if _find_by_email(db, email) is None:
        logger.warning("Registered user %s not visible on re-read", user.id)

    logger.info("Registered user %s (doctor=%s)", user.id, user.is_doctor)
    return user, issue_token(user.id)


def login(db: Session, email: str, password: str) -> Tuple[models.User, str]:
    user = _find_by_email(db, _clean(email).lower())
    if not user or not verify_password(password or "", user.password_hash):
        raise InvalidCredentials()
    return user, issue_token(user.id)


def get_profile(db: Session, user_id: int) -> models.User:
    user = db.get(models.User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def update_profile(db: Session, user_id: int, fields: Dict[str, Any]) -> Tuple[models.User, str]:
    """Apply the provided profile fields; always hands back a fresh token."""
    user = get_profile(db, user_id)

    if fields.get("name") is not None:
        name = _clean(fields["name"])
        if not name:
            raise ValidationError("Name cannot be empty")
        user.name = name

    if fields.get("email") is not None:
        email = _clean(fields["email"]).lower()
        if email != user.email:
            if _find_by_email(db, email):
                raise DuplicateEmail()
            user.email = email

    if fields.get("password"):
        user.password_hash = hash_password(fields["password"])

    if fields.get("phone_number") is not None:
        user.phone_number = _clean(fields["phone_number"])

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)
    return user, issue_token(user.id)
