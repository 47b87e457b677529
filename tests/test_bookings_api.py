"""
Booking endpoints: validation, state machine, check-in/out and side effects.
"""
import pytest

from booking_admin.models.enums import BookingStatus

IN = "2024-01-10T14:00:00"
OUT = "2024-01-12T11:00:00"


def _room_status(client, headers, room_id):
    return client.get(f"/api/rooms/{room_id}", headers=headers).json()["status"]


class TestCreateBooking:

    def test_create_confirmed_booking(self, client, admin_headers, create_room, notifier):
        room = create_room()

        response = client.post(
            "/api/bookings",
            json={
                "customer_name": "Jane Doe",
                "email": "jane@example.com",
                "clock_in": IN,
                "clock_out": OUT,
                "room_id": room["id"],
                "status": "confirmed",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "confirmed"
        assert body["booking_originate"] == "Direct"
        assert body["room"]["room_number"] == "R101"
        assert body["created_by"] is not None
        assert _room_status(client, admin_headers, room["id"]) == "occupied"
        assert notifier.names() == ["created"]

    def test_pending_is_default_status(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT, status="pending")

        assert booking["status"] == "pending"
        assert _room_status(client, admin_headers, room["id"]) == "available"

    def test_overlap_rejected(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        create_booking(room["id"], "2024-01-10T00:00:00", "2024-01-12T00:00:00")

        response = client.post(
            "/api/bookings",
            json={
                "customer_name": "John Roe",
                "email": "john@example.com",
                "clock_in": "2024-01-11T00:00:00",
                "clock_out": "2024-01-13T00:00:00",
                "room_id": room["id"],
                "status": "confirmed",
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "ROOM_UNAVAILABLE"
        assert body["message"] == ["Selected room is not available for the chosen dates"]

    def test_maintenance_room_rejected(self, client, admin_headers, create_room):
        room = create_room(status="maintenance")

        response = client.post(
            "/api/bookings",
            json={
                "customer_name": "Jane Doe",
                "email": "jane@example.com",
                "clock_in": IN,
                "clock_out": OUT,
                "room_id": room["id"],
            },
            headers=admin_headers,
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [
            {"clock_in": OUT, "clock_out": IN},
            {"email": None},
            {"room_id": None},
            {"status": "completed"},
        ],
    )
    def test_invalid_payload(self, client, admin_headers, create_room, overrides):
        room = create_room()
        payload = {
            "customer_name": "Jane Doe",
            "email": "jane@example.com",
            "clock_in": IN,
            "clock_out": OUT,
            "room_id": room["id"],
        }
        payload.update(overrides)
        payload = {key: value for key, value in payload.items() if value is not None}

        response = client.post("/api/bookings", json=payload, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_room(self, client, admin_headers):
        response = client.post(
            "/api/bookings",
            json={
                "customer_name": "Jane Doe",
                "email": "jane@example.com",
                "clock_in": IN,
                "clock_out": OUT,
                "room_id": "missing",
            },
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ROOM_NOT_FOUND"


class TestAvailableRooms:

    def test_scenario_r101(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        create_booking(room["id"], "2024-01-10T00:00:00", "2024-01-12T00:00:00")

        blocked = client.get(
            "/api/bookings/available-rooms",
            params={"checkIn": "2024-01-10T00:00:00", "checkOut": "2024-01-12T00:00:00"},
            headers=admin_headers,
        ).json()
        free = client.get(
            "/api/bookings/available-rooms",
            params={"checkIn": "2024-01-12T00:00:00", "checkOut": "2024-01-14T00:00:00"},
            headers=admin_headers,
        ).json()

        assert blocked == {"data": [], "count": 0}
        assert free["count"] == 1
        assert free["data"][0]["room_number"] == "R101"

    def test_missing_dates(self, client, admin_headers):
        response = client.get("/api/bookings/available-rooms", headers=admin_headers)
        assert response.status_code == 422

    def test_inverted_range(self, client, admin_headers):
        response = client.get(
            "/api/bookings/available-rooms",
            params={"checkIn": "2024-01-12T00:00:00", "checkOut": "2024-01-10T00:00:00"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"


class TestUpdateBooking:

    def test_cancel_releases_room_and_notifies(self, client, admin_headers, create_room, create_booking, notifier):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.patch(
            f"/api/bookings/{booking['id']}", json={"status": "canceled"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "canceled"
        assert _room_status(client, admin_headers, room["id"]) == "available"
        assert notifier.calls[-1][0] == "updated"
        assert notifier.calls[-1][2] == BookingStatus.CONFIRMED

    def test_illegal_transition(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT, status="pending")

        response = client.patch(
            f"/api/bookings/{booking['id']}", json={"status": "completed"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_same_status_is_noop(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.patch(
            f"/api/bookings/{booking['id']}",
            json={"status": "confirmed", "note": "late arrival"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["note"] == "late arrival"

    def test_reschedule_into_conflict(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        create_booking(room["id"], "2024-01-10T00:00:00", "2024-01-12T00:00:00")
        second = create_booking(room["id"], "2024-01-12T00:00:00", "2024-01-14T00:00:00")

        response = client.patch(
            f"/api/bookings/{second['id']}",
            json={"clock_in": "2024-01-11T00:00:00"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ROOM_UNAVAILABLE"

    def test_window_must_stay_ordered(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.patch(
            f"/api/bookings/{booking['id']}",
            json={"clock_in": "2024-01-20T00:00:00"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_unknown_field_rejected(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.patch(
            f"/api/bookings/{booking['id']}", json={"is_checked_in": True}, headers=admin_headers
        )

        assert response.status_code == 422


class TestCheckInOut:

    def test_check_in_then_out(self, client, admin_headers, create_room, create_booking, notifier):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        checked_in = client.patch(
            f"/api/bookings/check/{booking['id']}", json={"is_checked_in": True}, headers=admin_headers
        ).json()
        checked_out = client.patch(
            f"/api/bookings/check/{booking['id']}", json={"is_checked_out": True}, headers=admin_headers
        ).json()

        assert checked_in["is_checked_in"] is True
        assert checked_in["checked_in_at"] is not None
        assert checked_out["is_checked_out"] is True
        assert checked_out["checked_in_at"] == checked_in["checked_in_at"]
        assert [call[2] for call in notifier.calls if call[0] == "checked"] == [["check_in"], ["check_out"]]

    def test_check_out_requires_check_in(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.patch(
            f"/api/bookings/check/{booking['id']}", json={"is_checked_out": True}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "GUEST_NOT_CHECKED_IN"

    def test_canceled_booking_cannot_check_in(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)
        client.patch(f"/api/bookings/{booking['id']}", json={"status": "canceled"}, headers=admin_headers)

        response = client.patch(
            f"/api/bookings/check/{booking['id']}", json={"is_checked_in": True}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BOOKING_CLOSED"

    def test_empty_payload(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.patch(f"/api/bookings/check/{booking['id']}", json={}, headers=admin_headers)

        assert response.status_code == 422


class TestListAndDelete:

    def test_list_filters_and_index(self, client, admin_headers, create_room, create_booking):
        first_room = create_room()
        second_room = create_room(room_number="R102", name="Sea View")
        create_booking(first_room["id"], IN, OUT, customer_name="Alice Smith")
        create_booking(second_room["id"], IN, OUT, customer_name="Bob Jones", status="pending")
        create_booking(first_room["id"], "2024-02-01T00:00:00", "2024-02-03T00:00:00", customer_name="Alicia Keys")

        everything = client.get("/api/bookings", headers=admin_headers).json()
        alices = client.get("/api/bookings", params={"search_key": "ali"}, headers=admin_headers).json()
        pending = client.get("/api/bookings", params={"status": "pending"}, headers=admin_headers).json()
        paged = client.get("/api/bookings", params={"page": 2, "size": 2}, headers=admin_headers).json()

        assert everything["count"] == 3
        assert [item["index"] for item in everything["data"]] == [3, 2, 1]
        assert all("room" in item and item["room"]["price_per_night"] for item in everything["data"])
        assert alices["count"] == 2
        assert [item["customer_name"] for item in pending["data"]] == ["Bob Jones"]
        assert paged["count"] == 3
        assert len(paged["data"]) == 1
        assert paged["data"][0]["index"] == 1

    def test_get_missing_booking(self, client, admin_headers):
        response = client.get("/api/bookings/does-not-exist", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BOOKING_NOT_FOUND"

    def test_delete_confirmed_booking(self, client, admin_headers, create_room, create_booking, notifier):
        room = create_room()
        booking = create_booking(room["id"], IN, OUT)

        response = client.delete(f"/api/bookings/{booking['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["id"] == booking["id"]
        assert _room_status(client, admin_headers, room["id"]) == "available"
        assert client.get(f"/api/bookings/{booking['id']}", headers=admin_headers).status_code == 404
        assert notifier.names()[-1] == "deleted"
