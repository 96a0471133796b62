# medconnect/schemas.py
from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AliasGenerator, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from .schedule import TIME_PATTERN

AppointmentStatus = Literal["pending", "confirmed", "completed", "cancelled"]
PaymentMethod = Literal["card", "phonepe", "googlepay"]
TimeStr = Annotated[str, Field(pattern=TIME_PATTERN)]


class RequestModel(BaseModel):
    """Request bodies: camelCase on the wire, snake_case also accepted."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResponseModel(BaseModel):
    """Responses: read from ORM attributes, written as camelCase."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


# Users
class UserRegister(RequestModel):
    name: str
    email: EmailStr
    password: str
    is_doctor: bool = False
    phone_number: str = ""


class UserLogin(RequestModel):
    email: str
    password: str


class UserProfileUpdate(RequestModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None


class UserOut(ResponseModel):
    id: int
    name: str
    email: str
    phone_number: str = ""
    is_doctor: bool
    is_admin: bool


class AuthOut(UserOut):
    token: str


class UserSummary(ResponseModel):
    id: int
    name: str
    email: str


class PatientSummary(UserSummary):
    phone_number: str = ""


# Doctors
class ScheduleEntryIn(RequestModel):
    day: Optional[str] = None
    start_time: Optional[TimeStr] = None
    end_time: Optional[TimeStr] = None
    is_available: Optional[bool] = None


class ScheduleEntry(BaseModel):
    day: str
    startTime: str
    endTime: str
    isAvailable: bool


ScheduleIn = List[Union[ScheduleEntryIn, TimeStr]]


class DoctorFields(RequestModel):
    timings: Optional[ScheduleIn] = None

    def to_fields(self) -> dict:
        """Fields the client actually sent, with schedule items as plain camelCase values."""
        fields = self.model_dump(exclude_unset=True, exclude={"timings"})
        if self.timings is not None:
            fields["timings"] = [
                t.model_dump(by_alias=True, exclude_none=True) if isinstance(t, ScheduleEntryIn) else t
                for t in self.timings
            ]
        return fields


class DoctorCreate(DoctorFields):
    user: Optional[int] = Field(default=None, description="Owning user id; defaults to the requester")
    name: Optional[str] = None
    specialization: str = Field(..., min_length=1)
    experience: int = Field(default=0, ge=0)
    fees: float = Field(default=500, ge=0)
    phone: str = ""
    address: Optional[str] = None
    bio: str = ""
    image: Optional[str] = None
    rating: float = Field(default=0, ge=0, le=5)
    num_reviews: int = Field(default=0, ge=0)


class DoctorUpdate(DoctorFields):
    name: Optional[str] = None
    specialization: Optional[str] = Field(default=None, min_length=1)
    experience: Optional[int] = Field(default=None, ge=0)
    fees: Optional[float] = Field(default=None, ge=0)
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    num_reviews: Optional[int] = Field(default=None, ge=0)


class DoctorSummary(ResponseModel):
    id: int
    name: str
    specialization: str
    fees: float
    phone: Optional[str] = None


class DoctorOut(ResponseModel):
    id: int
    user: UserSummary
    name: str
    specialization: str
    experience: int
    fees: float
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    rating: float
    num_reviews: int
    timings: List[ScheduleEntry]
    available_days: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Appointments
class AppointmentCreate(RequestModel):
    doctor: int
    appointment_date: date
    time_slot: str = Field(..., min_length=1)
    reason: str
    payment_method: Optional[PaymentMethod] = None
    is_paid: bool = False


class AppointmentStatusUpdate(RequestModel):
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class AppointmentOut(ResponseModel):
    id: int
    doctor: DoctorSummary
    user: PatientSummary
    appointment_date: date
    time_slot: str
    reason: str
    status: AppointmentStatus
    notes: Optional[str] = None
    payment_method: PaymentMethod
    is_paid: bool
    fees: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
