"""
Room endpoints: uniqueness, filters, status override and deletion.
"""
from datetime import timedelta

from booking_admin.utils.datetime_utils import utcnow


class TestRoomCrud:

    def test_create_normalises_input(self, client, admin_headers):
        response = client.post(
            "/api/rooms",
            json={
                "name": "Family Suite",
                "room_number": "F1",
                "room_type": "family",
                "capacity": 4,
                "price_per_night": "250.50",
                "amenities": [" wifi ", "tv", "wifi", ""],
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["room_type"] == "FAMILY"
        assert body["status"] == "available"
        assert body["amenities"] == ["wifi", "tv"]

    def test_duplicate_room_number(self, client, admin_headers, create_room):
        create_room()

        response = client.post(
            "/api/rooms",
            json={"name": "Other", "room_number": "R101", "room_type": "SINGLE", "capacity": 1, "price_per_night": 50},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"
        assert response.json()["message"] == ["Room number already exists"]

    def test_room_number_reusable_after_soft_delete(self, client, admin_headers, create_room):
        room = create_room()
        client.delete(f"/api/rooms/{room['id']}", headers=admin_headers)

        again = create_room()

        assert again["id"] != room["id"]

    def test_update_rejects_taken_number(self, client, admin_headers, create_room):
        create_room()
        other = create_room(room_number="R102")

        response = client.patch(f"/api/rooms/{other['id']}", json={"room_number": "R101"}, headers=admin_headers)

        assert response.status_code == 400

    def test_update_fields(self, client, admin_headers, create_room):
        room = create_room()

        response = client.patch(
            f"/api/rooms/{room['id']}",
            json={"price_per_night": "99.90", "capacity": 3},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["capacity"] == 3
        assert response.json()["price_per_night"] == "99.90"

    def test_invalid_capacity(self, client, admin_headers):
        response = client.post(
            "/api/rooms",
            json={"name": "Bad", "room_number": "X1", "room_type": "SINGLE", "capacity": 0, "price_per_night": 10},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_status_override(self, client, admin_headers, create_room):
        room = create_room()

        response = client.patch(
            f"/api/rooms/{room['id']}/status", json={"status": "MAINTENANCE"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "maintenance"


class TestRoomFilters:

    def test_filters(self, client, admin_headers, create_room):
        create_room(room_number="A1", name="Budget", room_type="SINGLE", capacity=1, price_per_night="60", amenities=["wifi"])
        create_room(room_number="A2", name="Comfort", room_type="DOUBLE", capacity=2, price_per_night="120", amenities=["wifi", "tv"])
        create_room(room_number="A3", name="Deluxe Corner", room_type="DELUXE", capacity=3, price_per_night="300", amenities=["tv", "minibar"])

        def numbers(**params):
            body = client.get("/api/rooms", params=params, headers=admin_headers).json()
            return sorted(item["room_number"] for item in body["data"])

        assert numbers() == ["A1", "A2", "A3"]
        assert numbers(search_key="deluxe") == ["A3"]
        assert numbers(room_type="DOUBLE") == ["A2"]
        assert numbers(capacity=2) == ["A2", "A3"]
        assert numbers(min_price="100", max_price="200") == ["A2"]
        assert numbers(amenities="wifi,tv") == ["A2"]
        assert numbers(amenities="TV") == ["A2", "A3"]


class TestRoomDelete:

    def test_soft_delete_hides_room(self, client, admin_headers, create_room):
        room = create_room()

        response = client.delete(f"/api/rooms/{room['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/api/rooms/{room['id']}", headers=admin_headers).status_code == 404
        assert client.get("/api/rooms", headers=admin_headers).json()["count"] == 0

    def test_upcoming_confirmed_booking_blocks_delete(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        start = utcnow() + timedelta(days=5)
        create_booking(room["id"], start.isoformat(), (start + timedelta(days=2)).isoformat())

        response = client.delete(f"/api/rooms/{room['id']}", headers=admin_headers)

        assert response.status_code == 400

    def test_hard_delete_refused_with_booking_history(self, client, admin_headers, create_room, create_booking):
        room = create_room()
        create_booking(room["id"], "2020-01-10T00:00:00", "2020-01-12T00:00:00", status="pending")

        response = client.delete(f"/api/rooms/{room['id']}", params={"hard": True}, headers=admin_headers)

        assert response.status_code == 400

    def test_hard_delete(self, client, admin_headers, create_room):
        room = create_room()

        response = client.delete(f"/api/rooms/{room['id']}", params={"hard": True}, headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/api/rooms/{room['id']}", headers=admin_headers).status_code == 404
