# medconnect/services/booking.py
"""Appointment lifecycle.

pending -> confirmed -> completed, and pending/confirmed -> cancelled.
completed and cancelled are terminal.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from .. import models
from ..errors import DoctorNotFound, DoctorProfileNotFound, InvalidState, NotFound, Unauthorized, ValidationError
from .directory import get_doctor_for_user

logger = logging.getLogger(__name__)

TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    return new == current or new in TRANSITIONS.get(current, set())


def _with_parties(db: Session):
    return db.query(models.Appointment).options(
        joinedload(models.Appointment.doctor),
        joinedload(models.Appointment.user),
    )


def _load(db: Session, appointment_id: int) -> models.Appointment:
    appt = _with_parties(db).filter(models.Appointment.id == appointment_id).first()
    if not appt:
        raise NotFound("Appointment not found")
    return appt


def create(
    db: Session,
    patient: models.User,
    doctor_id: int,
    appointment_date: date,
    time_slot: str,
    reason: str,
    payment_method: Optional[str] = None,
    is_paid: bool = False,
) -> models.Appointment:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Reason for the appointment is required")
    if not (time_slot or "").strip():
        raise ValidationError("Time slot is required")

    doctor = db.get(models.Doctor, doctor_id)
    if not doctor:
        raise DoctorNotFound()

    appt = models.Appointment(
        doctor_id=doctor.id,
        user_id=patient.id,
        appointment_date=appointment_date,
        time_slot=time_slot.strip(),
        reason=reason,
        status="pending",
        payment_method=payment_method or "card",
        is_paid=bool(is_paid),
        fees=doctor.fees,
    )
    db.add(appt)
    db.commit()
    logger.info("Appointment %s booked by user %s with doctor %s", appt.id, patient.id, doctor.id)
    return _load(db, appt.id)


def get_by_id(db: Session, appointment_id: int, requester: models.User) -> models.Appointment:
    appt = _load(db, appointment_id)
    is_patient = appt.user_id == requester.id
    is_doctor = appt.doctor is not None and appt.doctor.user_id == requester.id
    if not (is_patient or is_doctor or requester.is_admin):
        raise Unauthorized("Not authorized to view this appointment")
    return appt


def list_for_patient(db: Session, patient: models.User) -> List[models.Appointment]:
    return (
        _with_parties(db)
        .filter(models.Appointment.user_id == patient.id)
        .order_by(models.Appointment.created_at.desc(), models.Appointment.id.desc())
        .all()
    )


def list_for_doctor(db: Session, requester: models.User) -> List[models.Appointment]:
    profile = get_doctor_for_user(db, requester.id)
    if not profile:
        raise DoctorProfileNotFound()
    return (
        _with_parties(db)
        .filter(models.Appointment.doctor_id == profile.id)
        .order_by(models.Appointment.appointment_date.asc(), models.Appointment.id.asc())
        .all()
    )


def update_status(
    db: Session,
    appointment_id: int,
    requester: models.User,
    status: Optional[str] = None,
    notes: Optional[str] = None,
) -> models.Appointment:
    appt = _load(db, appointment_id)
    profile = get_doctor_for_user(db, requester.id)
    if not profile or profile.id != appt.doctor_id:
        raise Unauthorized("Not authorized to update this appointment")

    if status and not can_transition(appt.status, status):
        raise InvalidState(f"Cannot change appointment from {appt.status} to {status}")

    if status:
        appt.status = status
    if notes is not None:
        appt.notes = notes
    db.commit()
    logger.info("Appointment %s status=%s", appt.id, appt.status)
    return _load(db, appt.id)


def cancel(db: Session, appointment_id: int, requester: models.User) -> models.Appointment:
    appt = _load(db, appointment_id)
    if appt.user_id != requester.id:
        raise Unauthorized("Not authorized to cancel this appointment")
    if appt.status == "completed":
        raise InvalidState("Cannot cancel a completed appointment")
    if appt.status == "cancelled":
        raise InvalidState("Appointment is already cancelled")

    appt.status = "cancelled"
    db.commit()
    logger.info("Appointment %s cancelled by patient %s", appt.id, requester.id)
    return _load(db, appt.id)
