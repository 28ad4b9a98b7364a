from datetime import date, datetime, timedelta

import pytest

from schools import repository, schemas, service

NOW = datetime(2026, 10, 19, 14, 30)
TODAY = NOW.date()


def _school(school_id, status, priority, **extra):
    return {"id": school_id, "name": f"School {school_id}", "status": status, "priority": priority, **extra}


def test_status_precedence_then_priority():
    rows = [
        _school(1, "pending", 1),
        _school(2, "started", 5),
        _school(3, "completed", 1),
        _school(4, "started", 2),
    ]
    ordered = service.order_schools(rows)
    assert [(r["status"], r["priority"]) for r in ordered] == [
        ("started", 2),
        ("started", 5),
        ("pending", 1),
        ("completed", 1),
    ]


def test_null_status_sorts_after_known_statuses():
    rows = [_school(1, None, 1), _school(2, "completed", 9)]
    assert [r["id"] for r in service.order_schools(rows)] == [2, 1]


def test_ties_keep_id_order():
    rows = [_school(3, "pending", 1), _school(1, "pending", 1)]
    assert [r["id"] for r in service.order_schools(rows)] == [1, 3]


def test_notification_window_is_one_to_seven_days():
    after, until = service.notification_window(TODAY)
    assert after == TODAY
    assert until == TODAY + timedelta(days=7)


@pytest.mark.parametrize(
    ("offset_days", "expected"),
    [(1, 1), (3, 3), (7, 7)],
)
def test_days_until_rounds_up_partial_days(offset_days, expected):
    assert service.days_until(TODAY + timedelta(days=offset_days), NOW) == expected


def test_days_until_at_midnight_is_exact():
    assert service.days_until(date(2026, 10, 26), datetime(2026, 10, 19)) == 7


def test_deadline_message():
    assert service.deadline_message("North High", 3) == "North High: 3 days until deadline"


@pytest.mark.parametrize(
    ("status", "offset_days", "expected"),
    [
        ("started", 1, True),
        ("started", 7, True),
        ("started", 8, False),
        ("started", 0, False),
        ("started", -2, False),
        ("pending", 3, False),
        ("completed", 3, False),
        (None, 3, False),
    ],
)
def test_is_due_soon(status, offset_days, expected):
    row = _school(1, status, 1, deadline=TODAY + timedelta(days=offset_days))
    assert service.is_due_soon(row, TODAY) is expected


def test_school_without_deadline_is_never_due():
    assert service.is_due_soon(_school(1, "started", 1, deadline=None), TODAY) is False


@pytest.mark.asyncio
async def test_notifications_keep_only_started_schools_inside_the_window(monkeypatch, fake_pool):
    async def fake_started(pool):
        return [
            _school(2, "started", 1, name="Overdue", deadline=TODAY - timedelta(days=2)),
            _school(3, "started", 1, name="Due Today", deadline=TODAY),
            _school(9, "started", 2, name="South High", deadline=TODAY + timedelta(days=1)),
            _school(5, "pending", 1, name="Not Started", deadline=TODAY + timedelta(days=3)),
            _school(4, "started", 1, name="North High", deadline=TODAY + timedelta(days=7)),
            _school(6, "started", 1, name="Too Far", deadline=TODAY + timedelta(days=8)),
        ]

    monkeypatch.setattr(repository, "list_started_with_deadline", fake_started)
    result = await service.notifications(fake_pool, now=NOW)

    assert result == [
        {"id": 9, "message": "South High: 1 days until deadline"},
        {"id": 4, "message": "North High: 7 days until deadline"},
    ]


@pytest.mark.asyncio
async def test_create_applies_defaults(monkeypatch, fake_pool):
    captured = {}

    async def fake_create(pool, **fields):
        captured.update(fields)
        return {"id": 1, **fields}

    monkeypatch.setattr(repository, "create_school", fake_create)
    row = await service.create_school(fake_pool, schemas.CreateSchoolRequest(name="North High"))

    assert captured["status"] == "pending"
    assert captured["priority"] == 1
    assert row["id"] == 1


@pytest.mark.asyncio
async def test_update_overwrites_all_three_fields(monkeypatch, fake_pool):
    captured = {}

    async def fake_update(pool, school_id, **fields):
        captured["id"] = school_id
        captured.update(fields)
        return 0

    monkeypatch.setattr(repository, "update_school", fake_update)
    affected = await service.update_school(fake_pool, 42, schemas.UpdateSchoolRequest(status="completed"))

    assert affected == 0
    assert captured == {"id": 42, "status": "completed", "start_date": None, "deadline": None}


def test_blank_dates_are_treated_as_missing():
    request = schemas.UpdateSchoolRequest(status="started", start_date="", deadline="2026-10-26")
    assert request.start_date is None
    assert request.deadline == date(2026, 10, 26)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        schemas.CreateSchoolRequest(name="North High", status="archived")
