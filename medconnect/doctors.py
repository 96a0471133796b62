# medconnect/doctors.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user, require_admin
from .services import directory

router = APIRouter(prefix="/api/doctors", tags=["doctors"])


@router.get("", response_model=list[schemas.DoctorOut])
def list_doctors(
    specialization: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(default=directory.DEFAULT_LIMIT, ge=1, le=100),
    db: Session = Depends(database.get_db),
):
    return directory.list_doctors(db, specialization=specialization, search=search, limit=limit)


@router.post("", response_model=schemas.DoctorOut, status_code=status.HTTP_201_CREATED)
def create_doctor(
    payload: schemas.DoctorCreate,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(require_admin),
):
    return directory.create_doctor_profile(db, current, payload.to_fields())


@router.get("/{doctor_id}", response_model=schemas.DoctorOut)
def get_doctor(doctor_id: int, db: Session = Depends(database.get_db)):
    return directory.get_doctor(db, doctor_id)


@router.put("/{doctor_id}", response_model=schemas.DoctorOut)
def update_doctor(
    doctor_id: int,
    payload: schemas.DoctorUpdate,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return directory.update_doctor_profile(db, doctor_id, payload.to_fields(), current)
