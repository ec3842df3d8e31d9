import pytest

from infra import resources
from infra.resources import DatabaseResource


class FailingConnection:
    async def __aenter__(self):
        raise ConnectionRefusedError("store unavailable")

    async def __aexit__(self, *exc):
        return False


class FlakyEngine:
    def __init__(self, failures: int):
        self.failures = failures
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        if self.attempts <= self.failures:
            return FailingConnection()
        return OkConnection()


class OkConnection:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, statement):
        return None


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []

    async def fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr(resources.asyncio, "sleep", fake_sleep)
    return recorded


async def test_connect_gives_up_after_last_attempt(sleeps):
    db = DatabaseResource("sqlite+aiosqlite://", connect_retries=3, backoff_seconds=0.5)
    db.engine = FlakyEngine(failures=10)

    with pytest.raises(ConnectionRefusedError):
        await db.connect()

    assert db.engine.attempts == 3
    assert sleeps == [0.5, 1.0]


async def test_connect_recovers_after_transient_failure(sleeps):
    db = DatabaseResource("sqlite+aiosqlite://", connect_retries=3, backoff_seconds=1.0)
    db.engine = FlakyEngine(failures=1)

    await db.connect()

    assert db.engine.attempts == 2
    assert sleeps == [1.0]


async def test_connect_against_real_engine(tmp_path, sleeps):
    db = await DatabaseResource(f"sqlite+aiosqlite:///{tmp_path / 'ping.db'}").init()
    try:
        await db.connect()
    finally:
        await db.shutdown()

    assert sleeps == []


async def test_uninitialized_resource_refuses_work():
    db = DatabaseResource("sqlite+aiosqlite://")

    with pytest.raises(RuntimeError):
        await db.connect()
    with pytest.raises(RuntimeError):
        db.get_session()
