import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_SECRET", "test-secret-for-cardshop-admin-api-0123456789")
os.environ.setdefault("ADMIN_USERS", "Alice, root")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cardshop import models
from cardshop.db import get_admin_handles, get_db, parse_admin_handles
from cardshop.main import app
from cardshop.revalidation import get_revalidator
from cardshop.schema import ensure_schema, reset_schema_guard
from cardshop.security import create_admin_token

ADMIN_HANDLES = parse_admin_handles("Alice,root")


class RecordingRevalidator:
    def __init__(self):
        self.calls = []

    def revalidate(self, paths):
        self.calls.append(list(paths))

    @property
    def paths(self):
        return [path for call in self.calls for path in call]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    reset_schema_guard()
    ensure_schema(engine)
    yield engine
    engine.dispose()
    reset_schema_guard()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def revalidator():
    return RecordingRevalidator()


@pytest.fixture
def client(session_factory, revalidator):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_revalidator] = lambda: revalidator
    app.dependency_overrides[get_admin_handles] = lambda: ADMIN_HANDLES
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_admin_token('Alice')}"}


@pytest.fixture
def stranger_headers():
    return {"Authorization": f"Bearer {create_admin_token('mallory')}"}


@pytest.fixture
def product(db_session):
    product = models.Product(id="prod_1", name="Game Key", price=Decimal("9.99"))
    db_session.add(product)
    db_session.commit()
    return product


def count_cards(session, product_id="prod_1"):
    session.expire_all()
    return session.query(models.CardKey).filter(models.CardKey.product_id == product_id).count()
