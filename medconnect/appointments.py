# medconnect/appointments.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user, require_doctor
from .services import booking

router = APIRouter(prefix="/api/appointments", tags=["appointments"])


@router.post("", response_model=schemas.AppointmentOut, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: schemas.AppointmentCreate,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return booking.create(
        db,
        patient=current,
        doctor_id=payload.doctor,
        appointment_date=payload.appointment_date,
        time_slot=payload.time_slot,
        reason=payload.reason,
        payment_method=payload.payment_method,
        is_paid=payload.is_paid,
    )


@router.get("", response_model=list[schemas.AppointmentOut])
def list_my_appointments(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return booking.list_for_patient(db, current)


# declared before /{appointment_id} so "doctor" is not read as an id
@router.get("/doctor", response_model=list[schemas.AppointmentOut])
def list_doctor_appointments(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(require_doctor),
):
    return booking.list_for_doctor(db, current)


@router.get("/{appointment_id}", response_model=schemas.AppointmentOut)
def get_appointment(
    appointment_id: int,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return booking.get_by_id(db, appointment_id, current)


@router.put("/{appointment_id}", response_model=schemas.AppointmentOut)
def update_appointment_status(
    appointment_id: int,
    payload: schemas.AppointmentStatusUpdate,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(require_doctor),
):
    return booking.update_status(db, appointment_id, current, status=payload.status, notes=payload.notes)


@router.put("/{appointment_id}/cancel", response_model=schemas.AppointmentOut)
def cancel_appointment(
    appointment_id: int,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return booking.cancel(db, appointment_id, current)
