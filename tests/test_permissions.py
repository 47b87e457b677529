"""
Permission guards on the REST routes.
"""
import pytest

from booking_admin.core.permissions import Permission, has_any_permission, list_permissions


class TestHasAnyPermission:

    def test_admin_bypasses(self):
        assert has_any_permission(["ADMIN"], [Permission.DELETE_ROOM])

    def test_any_of(self):
        assert has_any_permission(["VIEW_ROOM"], [Permission.EDIT_ROOM, Permission.VIEW_ROOM])
        assert not has_any_permission(["VIEW_ROOM"], [Permission.EDIT_ROOM])

    def test_catalogue_search(self):
        names = [item["name"] for item in list_permissions("booking")]
        assert "SYNC_BOOKING" in names
        assert "VIEW_ROOM" not in names


class TestRouteGuards:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/bookings"),
            ("get", "/api/rooms"),
            ("get", "/api/users"),
            ("get", "/api/roles"),
            ("get", "/api/logs"),
            ("get", "/api/bookings/sync"),
        ],
    )
    def test_forbidden_without_permission(self, client, make_user, headers_for, method, path):
        user = make_user()

        response = getattr(client, method)(path, headers=headers_for(user))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"

    def test_view_permission_allows_listing_only(self, client, make_user, headers_for):
        headers = headers_for(make_user(Permission.VIEW_ROOM))

        assert client.get("/api/rooms", headers=headers).status_code == 200
        created = client.post(
            "/api/rooms",
            json={"name": "X", "room_number": "X1", "room_type": "SINGLE", "capacity": 1, "price_per_night": 10},
            headers=headers,
        )
        assert created.status_code == 403

    def test_booking_clerk(self, client, make_user, headers_for, create_room):
        room = create_room()
        headers = headers_for(make_user(Permission.VIEW_BOOKING, Permission.CREATE_BOOKING))

        response = client.post(
            "/api/bookings",
            json={
                "customer_name": "Walk In",
                "email": "walkin@example.com",
                "clock_in": "2024-03-01T14:00:00",
                "clock_out": "2024-03-02T11:00:00",
                "room_id": room["id"],
            },
            headers=headers,
        )

        assert response.status_code == 201
        booking_id = response.json()["id"]
        assert client.delete(f"/api/bookings/{booking_id}", headers=headers).status_code == 403
