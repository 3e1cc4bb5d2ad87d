import mongomock
import pytest
from fastapi.testclient import TestClient

import file_proxy
from database import get_db
from main import app


@pytest.fixture
def db():
    return mongomock.MongoClient()["cinekahani_test"]


@pytest.fixture
def client(db):
    """API client backed by an in-memory database; lifespan is not run."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def free_movie():
    return {
        "imageURL": "u",
        "movieName": "Foo",
        "movieDescription": "d",
        "movieLink": "l",
        "movieType": "Free",
    }


class FakeResponse:
    """Stand-in for a streaming requests.Response from the file host."""

    def __init__(self, status_code=200, chunks=(b"abc", b"def")):
        self.status_code = status_code
        self.ok = status_code < 400
        self.chunks = list(chunks)
        self.closed = False

    def iter_content(self, chunk_size=1):
        yield from self.chunks

    def close(self):
        self.closed = True


@pytest.fixture
def upstream(monkeypatch):
    """Replace requests.get in file_proxy; set state["response"] to steer it."""
    state = {"response": FakeResponse(), "calls": [], "fake": FakeResponse}

    def fake_get(url, **kwargs):
        state["calls"].append((url, kwargs))
        if isinstance(state["response"], Exception):
            raise state["response"]
        return state["response"]

    monkeypatch.setattr(file_proxy.requests, "get", fake_get)
    return state
