"""Tests for the services and bookings routes."""

from bson.objectid import ObjectId

from tests.conftest import CUSTOMER_EMAIL

SERVICE = {"service_name": "Floral Stage", "category": "Wedding", "price": 250, "unit": "per event"}


def _booking(service_id, email=CUSTOMER_EMAIL):
    return {"userEmail": email, "serviceId": str(service_id), "serviceName": "Floral Stage", "price": 250}


class TestServices:
    def test_public_listing_and_lookup(self, client, db):
        service_id = db["services"].insert_one(dict(SERVICE)).inserted_id

        listing = client.get("/services")
        single = client.get(f"/services/{service_id}")

        assert listing.status_code == 200
        assert [s["service_name"] for s in listing.json()] == ["Floral Stage"]
        assert single.json()["_id"] == str(service_id)
        assert single.json()["category"] == "Wedding"

    def test_missing_service_passes_through_as_null(self, client):
        response = client.get(f"/services/{ObjectId()}")

        assert response.status_code == 200
        assert response.json() is None

    def test_admin_creates_service_with_extra_fields(self, client, db, admin_headers):
        response = client.post("/services", json={**SERVICE, "rating": 4.5}, headers=admin_headers)

        assert response.status_code == 200
        stored = db["services"].find_one({"_id": ObjectId(response.json()["insertedId"])})
        assert stored["rating"] == 4.5
        assert "created_at" in stored

    def test_rejects_negative_price(self, client, db, admin_headers):
        response = client.post("/services", json={**SERVICE, "price": -1}, headers=admin_headers)

        assert response.status_code == 400
        assert db["services"].count_documents({}) == 0

    def test_admin_deletes_service(self, client, db, admin_headers):
        service_id = db["services"].insert_one(dict(SERVICE)).inserted_id

        response = client.delete(f"/services/{service_id}", headers=admin_headers)

        assert response.json()["deletedCount"] == 1


class TestBookings:
    def test_anyone_can_book_with_server_defaults(self, client, db):
        service_id = db["services"].insert_one(dict(SERVICE)).inserted_id

        response = client.post("/bookings", json={**_booking(service_id), "status": "confirmed"})

        assert response.status_code == 200
        stored = db["bookings"].find_one({"_id": ObjectId(response.json()["insertedId"])})
        assert stored["status"] == "pending"
        assert stored["paymentStatus"] == "unpaid"
        assert stored["decorator"] is None
        assert stored["transactionId"] is None
        assert stored["serviceId"] == service_id

    def test_rejects_malformed_service_id(self, client, db):
        response = client.post("/bookings", json=_booking("nope"))

        assert response.status_code == 400
        assert db["bookings"].count_documents({}) == 0

    def test_listing_filters_by_email(self, client, customer_headers):
        service_id = ObjectId()
        client.post("/bookings", json=_booking(service_id))
        client.post("/bookings", json=_booking(service_id, email="other@x.com"))

        mine = client.get("/bookings", params={"email": CUSTOMER_EMAIL}, headers=customer_headers)
        everything = client.get("/bookings", headers=customer_headers)

        assert [b["userEmail"] for b in mine.json()] == [CUSTOMER_EMAIL]
        assert len(everything.json()) == 2
        assert mine.json()[0]["serviceId"] == str(service_id)

    def test_any_authenticated_caller_can_delete_any_booking(self, client, db, customer_headers):
        booking_id = db["bookings"].insert_one({"userEmail": "other@x.com"}).inserted_id

        response = client.delete(f"/bookings/{booking_id}", headers=customer_headers)

        assert response.json() == {"acknowledged": True, "deletedCount": 1}

    def test_admin_confirms_booking_without_touching_payment(self, client, db, admin_headers):
        booking_id = db["bookings"].insert_one(
            {"userEmail": CUSTOMER_EMAIL, "status": "pending", "paymentStatus": "unpaid"}
        ).inserted_id

        response = client.patch(f"/bookings/{booking_id}", json={"decoratorName": "Rina"}, headers=admin_headers)

        assert response.json() == {"acknowledged": True, "matchedCount": 1, "modifiedCount": 1}
        stored = db["bookings"].find_one({"_id": booking_id})
        assert stored["status"] == "confirmed"
        assert stored["decorator"] == "Rina"
        assert stored["paymentStatus"] == "unpaid"

    def test_confirm_requires_decorator_name(self, client, db, admin_headers):
        booking_id = db["bookings"].insert_one({"status": "pending"}).inserted_id

        response = client.patch(f"/bookings/{booking_id}", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert db["bookings"].find_one({"_id": booking_id})["status"] == "pending"


class TestLiveness:
    def test_root_reports_running(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Style Decor Server is Running"
