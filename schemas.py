"""
Database Schemas for the Style Decor booking app

Each Pydantic model validates a request body before it reaches a MongoDB
collection:
- users
- services
- bookings
- payments

Fields the server owns (role, booking status, payment status) are never
taken from the client.
"""
from typing import Annotated, List, Literal, Optional

from bson.objectid import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

BookingStatus = Literal["pending", "confirmed"]
PaymentStatus = Literal["unpaid", "paid"]


def _object_id_string(value: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError("must be a 24 character hex id")
    return value


ObjectIdStr = Annotated[str, AfterValidator(_object_id_string)]


class TokenRequest(BaseModel):
    """Claims to sign into an access token; ``email`` is the identity claim."""
    model_config = ConfigDict(extra="allow")

    email: EmailStr


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    name: Optional[str] = None
    photoURL: Optional[str] = None


class ServiceCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    service_name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    unit: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class BookingCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    userEmail: EmailStr
    userName: Optional[str] = None
    serviceId: ObjectIdStr
    serviceName: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    bookingDate: Optional[str] = None
    location: Optional[str] = None


class Booking(BookingCreate):
    """Stored shape of a booking, with the server-managed workflow fields."""
    status: BookingStatus = "pending"
    decorator: Optional[str] = None
    paymentStatus: PaymentStatus = "unpaid"
    transactionId: Optional[str] = None


class BookingConfirm(BaseModel):
    decoratorName: str = Field(..., min_length=1)


class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0)


class PaymentCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bookingId: ObjectIdStr
    transactionId: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    email: EmailStr
    serviceName: Optional[str] = None
    date: Optional[str] = None


class CategoryCount(BaseModel):
    category: Optional[str] = None
    count: int


class AdminStats(BaseModel):
    users: int
    services: int
    bookings: int
    revenue: float
    serviceStats: List[CategoryCount]
