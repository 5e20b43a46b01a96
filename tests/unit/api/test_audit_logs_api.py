"""Tests for the audit logs API: create, list, lookups, admin-gated deletes, error mapping."""

import pytest
from httpx import AsyncClient


def _body(**overrides):
    body = {"service": "PRODUCTION", "action": "CREATE", "message": "Plant created: Lavandula"}
    body.update(overrides)
    return body


async def _create(client: AsyncClient, **overrides) -> dict:
    r = await client.post("/api/v1/logs", json=_body(**overrides))
    assert r.status_code == 201, r.text
    return r.json()["data"]


async def test_create_log_returns_stored_record(client: AsyncClient):
    r = await client.post(
        "/api/v1/logs",
        json=_body(entity_id=12, entity_type="Plant", details={"latin_name": "Lavandula"}),
        headers={"User-Agent": "audit-tests"},
    )
    assert r.status_code == 201
    payload = r.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["id"] >= 1
    assert data["service"] == "PRODUCTION"
    assert data["log_level"] == "INFO"
    assert data["successful"] is True
    assert data["entity_id"] == "12"
    assert data["details"] == {"latin_name": "Lavandula"}
    assert data["user_agent"] == "audit-tests"
    assert data["ip_address"]
    assert "timestamp" in data and "created_at" in data


async def test_create_log_accepts_lowercase_enums(client: AsyncClient):
    data = await _create(client, service="storage", action="delete", log_level="warn")
    assert (data["service"], data["action"], data["log_level"]) == ("STORAGE", "DELETE", "WARN")


async def test_create_log_bogus_service_is_rejected(client: AsyncClient):
    r = await client.post("/api/v1/logs", json=_body(service="BOGUS"))
    assert r.status_code == 422
    payload = r.json()
    assert payload["success"] is False
    assert payload["kind"] == "validation"
    assert payload["fields"] == ["service"]

    listing = await client.get("/api/v1/logs")
    assert listing.json()["count"] == 0


async def test_create_log_overlong_message_is_rejected(client: AsyncClient):
    r = await client.post("/api/v1/logs", json=_body(message="x" * 1001))
    assert r.status_code == 422
    assert r.json()["fields"] == ["message"]


async def test_create_log_missing_required_field(client: AsyncClient):
    r = await client.post("/api/v1/logs", json={"service": "USER"})
    assert r.status_code == 422


async def test_list_logs_filters_and_envelope(client: AsyncClient):
    await _create(client, service="USER", message="u1", timestamp="2026-10-01T10:00:00Z")
    await _create(client, service="STORAGE", message="s1", timestamp="2026-10-02T10:00:00Z")
    await _create(client, service="USER", message="u2", timestamp="2026-10-03T10:00:00Z")

    r = await client.get("/api/v1/logs", params={"service": "USER"})
    assert r.status_code == 200
    payload = r.json()
    assert payload["success"] is True
    assert payload["count"] == 2
    assert payload["total"] == 2
    assert payload["page"] == 1
    assert payload["limit"] == 100
    assert [d["message"] for d in payload["data"]] == ["u2", "u1"]

    r = await client.get("/api/v1/logs", params={"page": 2, "limit": 2})
    payload = r.json()
    assert payload["count"] == 1
    assert payload["total"] == 3
    assert [d["message"] for d in payload["data"]] == ["u1"]

    r = await client.get(
        "/api/v1/logs",
        params={"start_date": "2026-10-02T00:00:00Z", "end_date": "2026-10-02T23:59:59Z"},
    )
    assert [d["message"] for d in r.json()["data"]] == ["s1"]


@pytest.mark.parametrize(
    "params, field",
    [
        ({"limit": 0}, "limit"),
        ({"limit": 5000}, "limit"),
        ({"page": 0}, "page"),
        ({"log_level": "LOUD"}, "log_level"),
        ({"start_date": "not-a-date"}, "start_date"),
    ],
)
async def test_list_logs_invalid_filter(client: AsyncClient, params, field):
    r = await client.get("/api/v1/logs", params=params)
    assert r.status_code == 422
    assert field in r.json()["fields"]


async def test_list_logs_inverted_range(client: AsyncClient):
    r = await client.get("/api/v1/logs", params={"start_date": "2026-02-01", "end_date": "2026-01-01"})
    assert r.status_code == 422
    assert r.json()["kind"] == "invalid_range"


async def test_get_log_by_id(client: AsyncClient):
    created = await _create(client)
    r = await client.get(f"/api/v1/logs/{created['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == created["id"]


async def test_get_log_by_id_not_found(client: AsyncClient):
    r = await client.get("/api/v1/logs/999999")
    assert r.status_code == 404
    assert r.json()["success"] is False


async def test_logs_by_service_and_entity(client: AsyncClient):
    await _create(client, service="STORAGE", entity_id="wh-1", entity_type="Warehouse")
    await _create(client, service="STORAGE", entity_id="pk-1", entity_type="Packaging")
    await _create(client, service="USER", entity_id="wh-1", entity_type="Warehouse")

    r = await client.get("/api/v1/logs/service/STORAGE", params={"limit": 1})
    assert r.status_code == 200
    assert r.json()["count"] == 1

    r = await client.get("/api/v1/logs/entity/wh-1", params={"entity_type": "Warehouse"})
    assert r.json()["count"] == 2

    r = await client.get("/api/v1/logs/service/BOGUS")
    assert r.status_code == 422


async def test_cleanup_requires_admin_key(client: AsyncClient):
    r = await client.delete("/api/v1/logs/cleanup/30")
    assert r.status_code == 403
    r = await client.delete("/api/v1/logs/cleanup/30", headers={"X-Admin-Key": "wrong-key-0123456789"})
    assert r.status_code == 403


async def test_cleanup_deletes_old_records(client: AsyncClient, admin_headers):
    await _create(client, message="ancient", timestamp="2020-01-01T00:00:00Z")
    await _create(client, message="recent")

    r = await client.delete("/api/v1/logs/cleanup/30", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"] == {"deleted_count": 1, "days": 30}

    r = await client.delete("/api/v1/logs/cleanup/30", headers=admin_headers)
    assert r.json()["data"]["deleted_count"] == 0


async def test_cleanup_rejects_non_positive_days(client: AsyncClient, admin_headers):
    r = await client.delete("/api/v1/logs/cleanup/0", headers=admin_headers)
    assert r.status_code == 422
    assert r.json()["fields"] == ["days"]


async def test_delete_log(client: AsyncClient, admin_headers):
    created = await _create(client)
    assert (await client.delete(f"/api/v1/logs/{created['id']}")).status_code == 403
    r = await client.delete(f"/api/v1/logs/{created['id']}", headers=admin_headers)
    assert r.status_code == 200
    r = await client.delete(f"/api/v1/logs/{created['id']}", headers=admin_headers)
    assert r.status_code == 404


async def test_storage_failure_maps_to_503(app_with_overrides, client: AsyncClient, audit_service, monkeypatch):
    from audit_trail.domain.exceptions import AuditError

    async def broken_insert(record):
        raise AuditError.storage("database unavailable")

    monkeypatch.setattr(audit_service._store, "insert", broken_insert)
    r = await client.post("/api/v1/logs", json=_body())
    assert r.status_code == 503
    assert r.json()["kind"] == "storage"


async def test_correlation_id_is_echoed(client: AsyncClient):
    r = await client.get("/api/v1/logs", headers={"X-Correlation-ID": "corr-123"})
    assert r.headers["X-Correlation-ID"] == "corr-123"
