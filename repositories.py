"""
Collection repositories.

Each repository is a thin pass-through over one MongoDB collection with
equality-only filters. The subclasses add the handful of updates the routes
perform, so that the update documents live next to the collection they touch.
"""
import logging
from typing import List, Optional

from fastapi import Depends, Request
from pymongo.database import Database
from pymongo.results import InsertOneResult, UpdateResult

from database import create_document, delete_result, insert_result, oid, serialize_doc, update_result
from schemas import Booking, BookingCreate, PaymentCreate, ServiceCreate, UserCreate

logger = logging.getLogger(__name__)

USERS = "users"
SERVICES = "services"
BOOKINGS = "bookings"
PAYMENTS = "payments"


class Repository:
    collection_name: str = ""

    def __init__(self, db: Database):
        self.db = db
        self.collection = db[self.collection_name]

    def create(self, data) -> dict:
        return insert_result(create_document(self.db, self.collection_name, data))

    def find_many(self, filt: Optional[dict] = None) -> List[dict]:
        return [serialize_doc(d) for d in self.collection.find(filt or {})]

    def find_one(self, filt: dict) -> Optional[dict]:
        return serialize_doc(self.collection.find_one(filt))

    def get(self, doc_id: str) -> Optional[dict]:
        return self.find_one({"_id": oid(doc_id)})

    def update_one(self, filt: dict, fields: dict) -> dict:
        return update_result(self.collection.update_one(filt, {"$set": fields}))

    def delete_one(self, filt: dict) -> dict:
        return delete_result(self.collection.delete_one(filt))

    def delete(self, doc_id: str) -> dict:
        return self.delete_one({"_id": oid(doc_id)})

    def count(self) -> int:
        return self.collection.estimated_document_count()


class UserRepository(Repository):
    collection_name = USERS

    def register(self, user: UserCreate) -> dict:
        if self.collection.find_one({"email": user.email}):
            logger.info("Registration skipped, %s already exists", user.email)
            return {"message": "user already exists", "insertedId": None}
        return self.create(user.model_dump(exclude_none=True))

    def role_of(self, email: str) -> Optional[str]:
        user = self.collection.find_one({"email": email}, {"role": 1})
        return user.get("role") if user else None

    def grant_decorator(self, user_id: str) -> dict:
        # Mounted at PATCH /users/admin/{id} but grants "decorator", not "admin".
        result = self.update_one({"_id": oid(user_id)}, {"role": "decorator"})
        logger.info("Granted decorator role to user %s (matched=%s)", user_id, result["matchedCount"])
        return result


class ServiceRepository(Repository):
    collection_name = SERVICES

    def create(self, service: ServiceCreate) -> dict:
        return super().create(service.model_dump())


class BookingRepository(Repository):
    collection_name = BOOKINGS

    def create(self, booking: BookingCreate) -> dict:
        doc = Booking(**booking.model_dump()).model_dump()
        # stored as an ObjectId so the stats $lookup on services._id resolves
        doc["serviceId"] = oid(doc["serviceId"])
        return super().create(doc)

    def for_user(self, email: Optional[str] = None) -> List[dict]:
        return self.find_many({"userEmail": email} if email else {})

    def confirm(self, booking_id: str, decorator_name: str) -> dict:
        result = self.update_one(
            {"_id": oid(booking_id)},
            {"status": "confirmed", "decorator": decorator_name},
        )
        logger.info("Booking %s confirmed with decorator %s", booking_id, decorator_name)
        return result

    def mark_paid(self, booking_id: str, transaction_id: str) -> UpdateResult:
        return self.collection.update_one(
            {"_id": oid(booking_id)},
            {"$set": {"paymentStatus": "paid", "transactionId": transaction_id, "status": "confirmed"}},
        )


class PaymentRepository(Repository):
    collection_name = PAYMENTS

    def insert(self, payment: PaymentCreate) -> InsertOneResult:
        return create_document(self.db, self.collection_name, payment)

    def for_email(self, email: str) -> List[dict]:
        return self.find_many({"email": email})

    def prices(self) -> List[float]:
        return [p.get("price") or 0 for p in self.collection.find({}, {"price": 1})]


# ----------------------- Dependencies -----------------------
def get_db(request: Request) -> Database:
    return request.app.state.db


def get_user_repository(db: Database = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_service_repository(db: Database = Depends(get_db)) -> ServiceRepository:
    return ServiceRepository(db)


def get_booking_repository(db: Database = Depends(get_db)) -> BookingRepository:
    return BookingRepository(db)


def get_payment_repository(db: Database = Depends(get_db)) -> PaymentRepository:
    return PaymentRepository(db)
