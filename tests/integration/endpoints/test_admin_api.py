"""
Integration tests for the admin API endpoints.
"""
import re
from datetime import timedelta

import pytest
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from activations.infrastructure.models import Activation
from keys.infrastructure.models import Key, LogEntry

KEY_PATTERN = re.compile(r"^[A-Z0-9]{5}(-[A-Z0-9]{5}){4}$")


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminAuthentication:
    """Integration tests for admin secret checks."""

    def test_missing_secret(self, api_client, admin_secret):
        """Test that requests without a secret are rejected."""
        response = api_client.get("/admin/keys")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert response.json()["error"]["message"] == "Admin secret required"

    def test_wrong_secret(self, api_client, admin_secret):
        """Test that a wrong secret is rejected."""
        response = api_client.post("/generateKey", {}, format="json", HTTP_ADMIN_SECRET="nope")

        assert response.status_code == 401
        assert response.json()["error"] == {
            "code": "UNAUTHORIZED",
            "message": "Invalid admin secret",
        }
        assert not Key.objects.exists()

    def test_secret_in_body(self, api_client, admin_secret):
        """Test that the secret may be sent in the JSON body."""
        response = api_client.post(
            "/generateKey", {"admin_secret": admin_secret}, format="json"
        )

        assert response.status_code == 200

    def test_server_secret_not_configured(self, api_client, settings):
        """Test that a missing server hash is a server error."""
        settings.ADMIN_SECRET_HASH = ""

        response = api_client.get("/admin/keys", HTTP_ADMIN_SECRET="anything")

        assert response.status_code == 500

    def test_client_endpoints_are_open(self, api_client, admin_secret):
        """Test that activation does not require the admin secret."""
        response = api_client.post(
            "/verifyKey",
            {"key": "ZZZZZ-ZZZZZ-ZZZZZ-ZZZZZ-ZZZZZ", "device_id": "device-001"},
            format="json",
        )

        assert response.status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestGenerateKeyAPI:
    """Integration tests for POST /generateKey."""

    def test_generate_defaults(self, admin_client):
        """Test issuing a key with defaults."""
        response = admin_client.post("/generateKey", {}, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert KEY_PATTERN.match(data["key"])
        assert data["duration_hours"] == 720
        assert data["max_devices"] == 10
        stored = Key.objects.get(key_string=data["key"])
        assert stored.status == "active"
        assert stored.expires_at - stored.created_at == timedelta(hours=720)

    def test_generate_custom(self, admin_client):
        """Test issuing a key with explicit values."""
        response = admin_client.post(
            "/generateKey",
            {"duration_hours": 1, "max_devices": 2, "status": "inactive"},
            format="json",
        )

        assert response.status_code == 200
        stored = Key.objects.get(key_string=response.json()["key"])
        assert stored.max_devices == 2
        assert stored.status == "inactive"

    @pytest.mark.parametrize(
        "payload",
        [
            {"duration_hours": 0},
            {"max_devices": -1},
            {"status": "paused"},
            {"duration_hours": "x"},
            {"duration_hours": 10**9},
            {"max_devices": 2**31},
        ],
    )
    def test_generate_invalid(self, admin_client, payload):
        """Test validation of issue requests."""
        response = admin_client.post("/generateKey", payload, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"
        assert not Key.objects.exists()


@pytest.mark.django_db
@pytest.mark.integration
class TestKeyAdminAPI:
    """Integration tests for /admin/keys endpoints."""

    def test_list_keys(self, admin_client, api_client, make_key):
        """Test listing keys with live activation counts."""
        older = make_key()
        newer = make_key()
        api_client.post(
            "/activateKey", {"key": older.key_string, "device_id": "device-001"}, format="json"
        )

        response = admin_client.get("/admin/keys")

        assert response.status_code == 200
        data = response.json()
        assert [item["id"] for item in data] == [newer.id, older.id]
        assert data[1]["activated_devices"] == 1
        assert data[1]["key_string"] == older.key_string

    def test_update_duration(self, admin_client, make_key):
        """Test that a new duration counts from the update time."""
        key = make_key(duration_hours=24)
        before = timezone.now()

        response = admin_client.put(
            f"/admin/keys/{key.id}", {"duration_hours": 48}, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["key"]["duration_hours"] == 48
        assert parse_datetime(data["key"]["expires_at"]) >= before + timedelta(hours=48)
        stored = Key.objects.get(id=key.id)
        assert stored.duration_hours == 48

    def test_update_status(self, admin_client, make_key):
        """Test disabling a key."""
        key = make_key()

        response = admin_client.put(f"/admin/keys/{key.id}", {"status": "inactive"}, format="json")

        assert response.status_code == 200
        assert Key.objects.get(id=key.id).status == "inactive"

    def test_update_without_fields(self, admin_client, make_key):
        """Test that an empty update is rejected."""
        key = make_key()

        response = admin_client.put(f"/admin/keys/{key.id}", {}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "No fields to update"

    @pytest.mark.parametrize("payload", [{"duration_hours": 10**9}, {"max_devices": 2**31}])
    def test_update_out_of_range(self, admin_client, make_key, payload):
        """Test that oversized values are rejected and leave the key unchanged."""
        key = make_key(duration_hours=24, max_devices=3)

        response = admin_client.put(f"/admin/keys/{key.id}", payload, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"
        stored = Key.objects.get(id=key.id)
        assert stored.duration_hours == 24
        assert stored.max_devices == 3

    def test_update_unknown(self, admin_client):
        """Test updating a key that does not exist."""
        response = admin_client.put("/admin/keys/999999", {"status": "inactive"}, format="json")

        assert response.status_code == 404

    def test_delete_key(self, admin_client, api_client, make_key):
        """Test that deleting a key removes its activations and logs."""
        key = make_key()
        api_client.post(
            "/activateKey", {"key": key.key_string, "device_id": "device-001"}, format="json"
        )

        response = admin_client.delete(f"/admin/keys/{key.id}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert not Key.objects.filter(id=key.id).exists()
        assert not Activation.objects.filter(key_id=key.id).exists()
        assert not LogEntry.objects.filter(key_id=key.id).exists()

    def test_delete_unknown(self, admin_client):
        """Test deleting a key that does not exist."""
        response = admin_client.delete("/admin/keys/999999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "KEY_NOT_FOUND"

    def test_key_logs(self, admin_client, api_client, make_key):
        """Test reading the activity log of a key, newest first."""
        key = make_key()
        payload = {"key": key.key_string, "device_id": "device-001"}
        api_client.post("/activateKey", payload, format="json")
        api_client.post("/activateKey", payload, format="json")
        api_client.post("/verifyKey", payload, format="json")

        response = admin_client.get(f"/admin/keys/{key.id}/logs")

        assert response.status_code == 200
        assert [entry["action"] for entry in response.json()] == [
            "verified",
            "reactivated",
            "activated",
        ]

    def test_cleanup(self, admin_client, make_key):
        """Test removing expired keys regardless of status."""
        expired = make_key(status="inactive", expires_in=timedelta(hours=-1))
        valid = make_key()

        response = admin_client.post("/admin/cleanup", {}, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["deleted_count"] == 1
        assert [item["id"] for item in data["deleted_keys"]] == [expired.id]
        assert Key.objects.filter(id=valid.id).exists()
