from datetime import datetime, timezone

import pytest

from uploaded_data import repository, service

CREATED = datetime(2026, 10, 1, 9, 30, tzinfo=timezone.utc)


def _stored(row_id, data):
    return {"id": row_id, "data": data, "created_at": CREATED}


def test_flatten_spreads_document_between_id_and_created_at():
    flat = service.flatten_row(_stored(7, {"name": "John", "email": "john@example.com"}))
    assert flat == {"id": 7, "name": "John", "email": "john@example.com", "created_at": CREATED}


def test_flatten_lets_document_id_shadow_row_id_but_not_created_at():
    flat = service.flatten_row(_stored(7, {"id": "S-1", "created_at": "yesterday"}))
    assert flat["id"] == "S-1"
    assert flat["created_at"] == CREATED


def test_filter_is_case_insensitive_substring():
    rows = [{"id": 1, "name": "John"}, {"id": 2, "name": "Amy"}, {"id": 3, "name": "Joan"}]
    assert [r["id"] for r in service.filter_rows(rows, {"name": "jo"})] == [1, 3]
    assert service.filter_rows(rows, {"name": "JO"}) == [rows[0], rows[2]]
    assert service.filter_rows(rows, {"name": "zz"}) == []


def test_filter_combines_criteria_with_and():
    rows = [
        {"id": 1, "name": "John", "school": "North High"},
        {"id": 2, "name": "Joan", "school": "South High"},
    ]
    assert service.filter_rows(rows, {"name": "jo", "school": "south"}) == [rows[1]]


def test_filter_skips_empty_criteria():
    rows = [{"id": 1, "name": "John"}, {"id": 2}]
    assert service.filter_rows(rows, {"name": "", "email": None}) == rows


def test_missing_or_null_field_never_matches():
    rows = [{"id": 1, "name": "John"}, {"id": 2, "email": "jo@example.com"}, {"id": 3, "name": None}]
    assert service.filter_rows(rows, {"name": "jo"}) == [rows[0]]


def test_non_string_values_compare_as_text():
    rows = [{"id": 1, "grade": 10}, {"id": 2, "grade": 9.0}, {"id": 3, "active": True}]
    assert service.filter_rows(rows, {"grade": "10"}) == [rows[0]]
    assert service.filter_rows(rows, {"grade": 9}) == [rows[1]]
    assert service.filter_rows(rows, {"active": "TRUE"}) == [rows[2]]


@pytest.mark.asyncio
async def test_list_all_flattens_newest_first(monkeypatch, fake_pool):
    calls = {}

    async def fake_list_rows(pool, *, newest_first=True):
        calls["newest_first"] = newest_first
        return [_stored(2, {"name": "Amy"}), _stored(1, {"name": "John"})]

    monkeypatch.setattr(repository, "list_rows", fake_list_rows)
    result = await service.list_all(fake_pool)
    assert calls["newest_first"] is True
    assert [r["id"] for r in result] == [2, 1]
    assert result[0]["name"] == "Amy"


@pytest.mark.asyncio
async def test_filter_data_scans_oldest_first(monkeypatch, fake_pool):
    async def fake_list_rows(pool, *, newest_first=True):
        assert newest_first is False
        return [_stored(1, {"name": "John"}), _stored(2, {"name": "Amy"}), _stored(3, {"name": "Joan"})]

    monkeypatch.setattr(repository, "list_rows", fake_list_rows)
    result = await service.filter_data(fake_pool, {"name": "jo"})
    assert [r["name"] for r in result] == ["John", "Joan"]
