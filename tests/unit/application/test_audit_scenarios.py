"""End-to-end ledger behaviour through AuditService on SQLite: round-trip, ordering, pagination, retention."""

import pytest

from audit_trail.domain.exceptions import AuditError, ErrorKind
from audit_trail.domain.models.event_record import EventRecord, ServiceType
from audit_trail.domain.models.query import QueryFilter


async def _total(audit_service) -> int:
    return (await audit_service.query(QueryFilter())).total


async def test_record_then_get_by_id_round_trip(audit_service, make_candidate, days_ago):
    candidate = make_candidate(
        service=ServiceType.PRODUCTION,
        message="Plant harvested",
        log_level="WARN",
        details={"plants": [1, 2, 3]},
        user_id="7",
        user_email="grower@example.com",
        entity_id="plant-9",
        entity_type="Plant",
        ip_address="192.168.1.100",
        user_agent="axios/1.6",
        source="production-service",
        successful=False,
        timestamp=days_ago(2),
    )
    stored = await audit_service.record(candidate)
    fetched = await audit_service.get_by_id(stored.id)

    assert fetched is not None
    assert fetched.id == stored.id
    for name in EventRecord.__dataclass_fields__:
        expected = getattr(candidate, name)
        actual = getattr(fetched, name)
        if name in ("service", "action", "log_level"):
            assert actual.value == str(getattr(expected, "value", expected)).upper()
        else:
            assert actual == expected, name


async def test_overlong_message_is_rejected_and_not_persisted(audit_service, make_candidate):
    await audit_service.record(make_candidate())
    before = await _total(audit_service)
    with pytest.raises(AuditError) as exc_info:
        await audit_service.record(make_candidate(message="m" * 1001))
    assert exc_info.value.kind == ErrorKind.VALIDATION
    assert exc_info.value.fields == ["message"]
    assert await _total(audit_service) == before


async def test_bogus_service_is_rejected_and_not_persisted(audit_service, make_candidate):
    before = await _total(audit_service)
    with pytest.raises(AuditError) as exc_info:
        await audit_service.record(make_candidate(service="BOGUS"))
    assert exc_info.value.kind == ErrorKind.VALIDATION
    assert "service" in exc_info.value.fields
    assert await _total(audit_service) == before


async def test_query_returns_strictly_descending_timestamps(audit_service, make_candidate, days_ago):
    for offset in (3, 1, 5, 2, 4):
        await audit_service.record(make_candidate(timestamp=days_ago(offset)))
    records = (await audit_service.query(QueryFilter())).records
    timestamps = [r.timestamp for r in records]
    assert all(a > b for a, b in zip(timestamps, timestamps[1:]))


@pytest.mark.parametrize("limit", [1, 2, 3, 7])
async def test_pages_reconstruct_full_result(audit_service, make_candidate, days_ago, limit):
    for offset in range(7):
        await audit_service.record(make_candidate(timestamp=days_ago(offset % 3)))
    full = (await audit_service.query(QueryFilter(limit=7))).records

    paged = []
    page = 1
    while True:
        chunk = (await audit_service.query(QueryFilter(page=page, limit=limit))).records
        if not chunk:
            break
        paged.extend(chunk)
        page += 1

    assert [r.id for r in paged] == [r.id for r in full]
    assert len({r.id for r in paged}) == 7


async def test_empty_result_is_success(audit_service):
    page = await audit_service.query(QueryFilter(service="ANALYTICS"))
    assert page.records == []
    assert page.total == 0


async def test_prune_twice_returns_zero_second_time(audit_service, make_candidate, days_ago):
    await audit_service.record(make_candidate(timestamp=days_ago(45)))
    await audit_service.record(make_candidate(timestamp=days_ago(1)))
    assert await audit_service.prune(30) == 1
    assert await audit_service.prune(30) == 0
    assert await audit_service.prune(60) == 0


async def test_service_and_retention_scenario(audit_service, make_candidate, days_ago):
    """A(USER, T), B(STORAGE, T+1), C(USER, T+2); prune with cutoff between T and T+1 removes only A."""
    a = await audit_service.record(make_candidate(service="USER", timestamp=days_ago(5)))
    b = await audit_service.record(make_candidate(service="STORAGE", timestamp=days_ago(3)))
    c = await audit_service.record(make_candidate(service="USER", timestamp=days_ago(1)))

    by_service = await audit_service.get_by_service("USER")
    assert [r.id for r in by_service] == [c.id, a.id]

    assert await audit_service.prune(4) == 1

    remaining = (await audit_service.query(QueryFilter())).records
    assert [r.id for r in remaining] == [c.id, b.id]


async def test_entity_history_is_complete(audit_service, make_candidate, days_ago):
    for offset in range(150):
        await audit_service.record(make_candidate(entity_id="w-1", entity_type="Warehouse", timestamp=days_ago(offset / 100)))
    await audit_service.record(make_candidate(entity_id="w-1", entity_type="Packaging"))

    history = await audit_service.get_by_entity("w-1", "Warehouse")
    assert len(history) == 150
    assert len(await audit_service.get_by_entity("w-1")) == 151


async def test_delete_by_id_then_lookup_misses(audit_service, make_candidate):
    stored = await audit_service.record(make_candidate())
    await audit_service.delete_by_id(stored.id)
    assert await audit_service.get_by_id(stored.id) is None
    with pytest.raises(AuditError) as exc_info:
        await audit_service.delete_by_id(stored.id)
    assert exc_info.value.kind == ErrorKind.NOT_FOUND
