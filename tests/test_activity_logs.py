"""
Change detection and the activity log it feeds.
"""
from booking_admin.utils.modifications import detect_modifications, flatten


class TestDetectModifications:

    def test_flatten_nested(self):
        assert flatten({"a": 1, "b": {"c": 2, "d": {"e": 3}}, "f": [1, 2], "g": {}}) == {
            "a": 1,
            "b.c": 2,
            "b.d.e": 3,
            "f": [1, 2],
            "g": {},
        }

    def test_changed_added_removed(self):
        old = {"name": "A", "capacity": 2, "note": "x", "id": "1"}
        new = {"name": "B", "capacity": 2, "price": 10, "id": "2"}

        assert detect_modifications(new, old) == [
            {"field_name": "name", "old_value": "A", "new_value": "B"},
            {"field_name": "note", "old_value": "x", "new_value": None},
            {"field_name": "price", "old_value": None, "new_value": 10},
        ]

    def test_creation_lists_every_field(self):
        modifications = detect_modifications({"name": "A", "changed_by": "u1"}, None)

        assert modifications == [{"field_name": "name", "old_value": None, "new_value": "A"}]

    def test_no_changes(self):
        assert detect_modifications({"a": {"b": 1}}, {"a": {"b": 1}}) == []


class TestActivityLogApi:

    def test_room_lifecycle_is_logged(self, client, admin_headers, admin_user, create_room):
        room = create_room()
        client.patch(f"/api/rooms/{room['id']}", json={"name": "Sea View"}, headers=admin_headers)
        client.delete(f"/api/rooms/{room['id']}", headers=admin_headers)

        response = client.get(
            "/api/logs", params={"entity": "rooms", "entity_id": room["id"]}, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        actions = sorted(log["action"] for log in body["data"])
        assert actions == ["ADD_DOCUMENT", "UPDATE_DOCUMENT", "UPDATE_DOCUMENT"]
        assert all(log["changed_by"] == admin_user.id for log in body["data"])

        renames = [
            modification
            for log in body["data"]
            for modification in log["modifications"]
            if modification["field_name"] == "name" and log["action"] == "UPDATE_DOCUMENT"
        ]
        assert renames == [{"field_name": "name", "old_value": "Garden View", "new_value": "Sea View"}]

    def test_filter_by_action(self, client, admin_headers, create_room):
        create_room()

        body = client.get("/api/logs", params={"action": "DELETE_DOCUMENT"}, headers=admin_headers).json()

        assert body["count"] == 0
