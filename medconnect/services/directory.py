# medconnect/services/directory.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .. import models
from ..errors import DuplicateDoctorProfile, NotFound, Unauthorized, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20

PROFILE_FIELDS = (
    "name", "specialization", "experience", "fees", "phone", "address",
    "bio", "image", "rating", "num_reviews",
)
# admin-only on update
ADMIN_FIELDS = ("rating", "num_reviews")


def list_doctors(
    db: Session,
    specialization: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = DEFAULT_LIMIT,
) -> List[models.Doctor]:
    query = db.query(models.Doctor).options(joinedload(models.Doctor.user))
    if specialization:
        query = query.filter(models.Doctor.specialization == specialization)
    if search:
        query = query.filter(func.lower(models.Doctor.name).contains(search.lower(), autoescape=True))
    doctors = query.order_by(models.Doctor.id.asc()).limit(limit).all()
    logger.debug("Doctor search specialization=%r search=%r -> %d", specialization, search, len(doctors))
    return doctors


def get_doctor(db: Session, doctor_id: int) -> models.Doctor:
    doc = db.get(models.Doctor, doctor_id)
    if not doc:
        raise NotFound("Doctor not found")
    return doc


def get_doctor_for_user(db: Session, user_id: int) -> Optional[models.Doctor]:
    return db.query(models.Doctor).filter(models.Doctor.user_id == user_id).first()


def create_doctor_profile(db: Session, requester: models.User, fields: Dict[str, Any]) -> models.Doctor:
    """Create the profile for ``fields["user"]`` (or the requester) with a normalized schedule."""
    owner_id = fields.get("user") or requester.id
    owner = db.get(models.User, owner_id)
    if not owner:
        raise NotFound("User not found")
    if not owner.is_doctor:
        raise ValidationError("User is not registered as a doctor")
    if get_doctor_for_user(db, owner.id):
        raise DuplicateDoctorProfile()

    values = {k: fields[k] for k in PROFILE_FIELDS if fields.get(k) is not None}
    values.setdefault("name", owner.name)
    doc = models.Doctor(user_id=owner.id, timings=fields.get("timings"), **values)

    db.add(doc)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateDoctorProfile()
    db.refresh(doc)
    logger.info("Created doctor profile %s for user %s", doc.id, owner.id)
    return doc


def update_doctor_profile(
    db: Session,
    doctor_id: int,
    fields: Dict[str, Any],
    requester: models.User,
) -> models.Doctor:
    """Overwrite only the fields present in ``fields``. Owner or admin only;
    rating and review count change only for admins."""
    doc = get_doctor(db, doctor_id)
    if doc.user_id != requester.id and not requester.is_admin:
        raise Unauthorized("Not authorized to update this doctor profile")

    editable = PROFILE_FIELDS if requester.is_admin else tuple(k for k in PROFILE_FIELDS if k not in ADMIN_FIELDS)
    for key in editable:
        if key in fields and fields[key] is not None:
            setattr(doc, key, fields[key])
    if fields.get("timings") is not None:
        doc.timings = fields["timings"]

    db.commit()
    db.refresh(doc)
    logger.info("Updated doctor profile %s", doc.id)
    return doc
