import pytest

from depthchart.persistence import DB_PATH_ENV, RosterStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store(tmp_path, monkeypatch) -> RosterStore:
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    return RosterStore(tmp_path / "depthchart.sqlite")
