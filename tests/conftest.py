import os
from contextlib import contextmanager
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]

# Isolate all tests to a throwaway instance + SQLite database
TEST_INSTANCE_DIR = ROOT_DIR / ".pytest-instance"
TEST_INSTANCE_DIR.mkdir(parents=True, exist_ok=True)
TEST_DB_PATH = TEST_INSTANCE_DIR / "test.sqlite"
os.environ["FLASK_ENV"] = "development"
os.environ["INSTANCE_DIR"] = str(TEST_INSTANCE_DIR)
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH.as_posix()}"
os.environ["ENABLE_TALISMAN"] = "0"
os.environ["RATELIMIT_ENABLED"] = "0"
os.environ["AUTO_CREATE_TABLES"] = "0"

from extensions import db  # noqa: E402  pylint:disable=wrong-import-position
from services.store import TrackerStore  # noqa: E402
import app as tracker_app  # noqa: E402

create_app = tracker_app.create_app


@pytest.fixture(scope="session")
def app():
    flask_app = create_app()
    flask_app.config.update(
        TESTING=True,
        WTF_CSRF_ENABLED=False,
        SERVER_NAME="localhost",
    )
    with flask_app.app_context():
        db.session.configure(expire_on_commit=False)
    return flask_app


@pytest.fixture
def db_session(app):
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
        if TEST_DB_PATH.exists():
            TEST_DB_PATH.unlink()
        for suffix in ("-wal", "-shm"):
            sidecar = TEST_DB_PATH.with_name(TEST_DB_PATH.name + suffix)
            if sidecar.exists():
                sidecar.unlink()
        db.create_all()
    yield db
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
        db.drop_all()


@pytest.fixture
def client(app, db_session):  # noqa: ARG001 - keeps DB initialised for request tests
    return app.test_client()


@pytest.fixture
def store(app, db_session):  # noqa: ARG001
    """A TrackerStore inside an app context held for the whole test (service tests)."""
    with app.test_request_context():
        yield TrackerStore(db.session)


@pytest.fixture
def seed(app, db_session):  # noqa: ARG001
    """Open a short-lived app context for inserting fixtures before HTTP calls.

    Usage::

        with seed() as store:
            alice = factories.create_player(store, "alice")
    """

    @contextmanager
    def _seed():
        with app.app_context():
            store = TrackerStore(db.session)
            yield store
            store.commit()

    return _seed


@pytest.fixture
def login(client):
    def _login(username: str):
        resp = client.post("/api/auth/login", json={"username": username})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login
