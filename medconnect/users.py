# medconnect/users.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user
from .services import accounts

router = APIRouter(prefix="/api/users", tags=["users"])


def _auth_out(user: models.User, token: str) -> schemas.AuthOut:
    return schemas.AuthOut.model_validate({**schemas.UserOut.model_validate(user).model_dump(), "token": token})


@router.post("", response_model=schemas.AuthOut, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserRegister, db: Session = Depends(database.get_db)):
    user, token = accounts.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        is_doctor=payload.is_doctor,
        phone_number=payload.phone_number,
    )
    return _auth_out(user, token)


@router.post("/login", response_model=schemas.AuthOut)
def login(payload: schemas.UserLogin, db: Session = Depends(database.get_db)):
    user, token = accounts.login(db, payload.email, payload.password)
    return _auth_out(user, token)


@router.get("/profile", response_model=schemas.UserOut)
def read_profile(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return accounts.get_profile(db, current.id)


@router.put("/profile", response_model=schemas.AuthOut)
def update_profile(
    payload: schemas.UserProfileUpdate,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    user, token = accounts.update_profile(db, current.id, payload.model_dump(exclude_unset=True))
    return _auth_out(user, token)
