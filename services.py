"""
Cross-collection operations: recording a payment against its booking, and
the admin dashboard statistics.
"""
import logging
from typing import List

from pymongo.database import Database
from pymongo.errors import PyMongoError

from database import insert_result, update_result
from repositories import BookingRepository, PaymentRepository, ServiceRepository, UserRepository, SERVICES
from schemas import PaymentCreate

logger = logging.getLogger(__name__)


def record_payment(db: Database, payment: PaymentCreate) -> dict:
    """Insert the payment, then mark its booking paid and confirmed.

    The two writes are independent. If the booking update fails the payment
    stays recorded and the error propagates; nothing is rolled back. Duplicate
    submissions of the same transaction are each recorded.
    """
    payments = PaymentRepository(db)
    bookings = BookingRepository(db)

    inserted = payments.insert(payment)
    logger.info("Recorded payment %s for booking %s", payment.transactionId, payment.bookingId)
    try:
        updated = bookings.mark_paid(payment.bookingId, payment.transactionId)
    except PyMongoError:
        logger.error(
            "Payment %s recorded but booking %s was not updated",
            inserted.inserted_id, payment.bookingId,
        )
        raise
    if updated.matched_count == 0:
        logger.warning("Payment %s references missing booking %s", inserted.inserted_id, payment.bookingId)

    return {"insertResult": insert_result(inserted), "updateResult": update_result(updated)}


CATEGORY_PIPELINE = [
    {
        "$lookup": {
            "from": SERVICES,
            "localField": "serviceId",
            "foreignField": "_id",
            "as": "serviceData",
        }
    },
    # bookings whose service no longer exists drop out here
    {"$unwind": "$serviceData"},
    {"$group": {"_id": "$serviceData.category", "count": {"$sum": 1}}},
    {"$project": {"category": "$_id", "count": 1, "_id": 0}},
]


def bookings_by_category(db: Database) -> List[dict]:
    return list(BookingRepository(db).collection.aggregate(CATEGORY_PIPELINE))


def admin_stats(db: Database) -> dict:
    revenue = sum(PaymentRepository(db).prices())
    return {
        "users": UserRepository(db).count(),
        "services": ServiceRepository(db).count(),
        "bookings": BookingRepository(db).count(),
        "revenue": revenue,
        "serviceStats": bookings_by_category(db),
    }
