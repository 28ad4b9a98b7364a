import json

import pytest

from ingestion import repository


class Transaction:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        self.conn.events.append("begin")

    async def __aexit__(self, exc_type, exc, tb):
        self.conn.events.append("rollback" if exc_type else "commit")
        return False


class BatchConnection:
    def __init__(self, fail_on=None):
        self.events = []
        self.fail_on = fail_on

    def transaction(self):
        return Transaction(self)

    async def executemany(self, sql, args):
        args = list(args)
        if self.fail_on is not None and any(self.fail_on in payload for (payload,) in args):
            raise RuntimeError("unsupported Unicode escape sequence")
        self.events.append(("executemany", " ".join(sql.split()), args))


class AcquireContext:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *exc):
        return False


class BatchPool:
    def __init__(self, conn):
        self.conn = conn

    def acquire(self):
        return AcquireContext(self.conn)


@pytest.mark.asyncio
async def test_rows_are_written_in_one_transaction():
    conn = BatchConnection()
    count = await repository.insert_rows(BatchPool(conn), [{"name": "Amy"}, {"name": "Józef", "age": 31}])

    assert count == 2
    begin, (_, sql, args), end = conn.events
    assert (begin, end) == ("begin", "commit")
    assert sql == "INSERT INTO uploaded_data (data) VALUES ($1::jsonb)"
    assert [json.loads(payload) for (payload,) in args] == [{"name": "Amy"}, {"name": "Józef", "age": 31}]


@pytest.mark.asyncio
async def test_failing_row_rolls_back_the_whole_upload():
    conn = BatchConnection(fail_on="bad")

    with pytest.raises(RuntimeError):
        await repository.insert_rows(BatchPool(conn), [{"name": "ok"}, {"name": "bad"}])

    assert conn.events == ["begin", "rollback"]


@pytest.mark.asyncio
async def test_no_rows_means_no_connection():
    class NoPool:
        def acquire(self):
            raise AssertionError("no rows, no connection")

    assert await repository.insert_rows(NoPool(), []) == 0
