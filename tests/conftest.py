import pytest

from tests.helpers import FakeConnection, FakePool


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_conn():
    return FakeConnection(
        results={
            "SELECT id,name FROM users LIMIT 200": (
                ["id", "name"],
                [(1, "Ada"), (2, "Linus")],
            ),
        }
    )


@pytest.fixture
def fake_pool(fake_conn):
    return FakePool(fake_conn)
