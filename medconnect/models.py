# medconnect/models.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Float, ForeignKey, Text, JSON, event
from sqlalchemy.orm import relationship, validates
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.sql import func
from sqlalchemy.types import TypeDecorator

from .database import Base
from . import schedule


class WeeklySchedule(TypeDecorator):
    """JSON column that always writes the seven-day schedule shape.

    Loaded rows are normalized by the Doctor load hook, which also sees
    ``available_days``.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return schedule.normalize_schedule(value)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)
    phone_number = Column(String(32), nullable=False, default="")
    is_doctor = Column(Boolean, nullable=False, default=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    doctor_profile = relationship("Doctor", back_populates="user", uselist=False)


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String(200), nullable=False, index=True)
    specialization = Column(String(120), nullable=False, index=True)
    experience = Column(Integer, nullable=False, default=0)
    fees = Column(Float, nullable=False, default=500)
    phone = Column(String(32), default="")
    address = Column(String(255), default="MedConnect Medical Center, New Delhi")
    bio = Column(Text, default="")
    image = Column(String(255), default="/images/doctor.jpg")
    rating = Column(Float, nullable=False, default=0)
    num_reviews = Column(Integer, nullable=False, default=0)
    timings = Column(WeeklySchedule, nullable=False, default=lambda: schedule.default_schedule())
    available_days = Column(JSON, nullable=False, default=lambda: schedule.available_days(schedule.default_schedule()))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="doctor_profile")
    appointments = relationship("Appointment", back_populates="doctor")

    @validates("timings")
    def _sync_available_days(self, key, value):
        week = schedule.normalize_schedule(value)
        self.available_days = schedule.available_days(week)
        return week


@event.listens_for(Doctor, "load")
@event.listens_for(Doctor, "refresh")
def _normalize_loaded_schedule(target, context, attrs=None):
    state = target.__dict__
    if "timings" not in state:
        return
    week = schedule.normalize_schedule(state["timings"], state.get("available_days"))
    set_committed_value(target, "timings", week)
    set_committed_value(target, "available_days", schedule.available_days(week))


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    appointment_date = Column(Date, nullable=False)
    time_slot = Column(String(64), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    payment_method = Column(String(20), nullable=False, default="card")
    is_paid = Column(Boolean, nullable=False, default=False)
    fees = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    doctor = relationship("Doctor", back_populates="appointments")
    user = relationship("User")
