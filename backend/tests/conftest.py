import os
import sys

# ensure backend package is on path for tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('DATABASE_URL', 'sqlite://')

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from waqf.config import settings
from waqf.database import Base, enable_sqlite_foreign_keys, get_db
from waqf.main import app

engine = create_engine('sqlite://', connect_args={'check_same_thread': False}, poolclass=StaticPool)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def fresh_schema(monkeypatch):
    monkeypatch.setattr(settings, 'ADMIN_API_KEY', None)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def translation(language, title, **extra):
    return {"language": language, "title": title, "description": f"{title} description", **extra}


@pytest.fixture
def make_project(client):
    def _make(slug='daara-touba', goal_amount=25_000_000, languages=('FR', 'AR'), **extra):
        payload = {
            "slug": slug,
            "goal_amount": goal_amount,
            "translations": [translation(lang, f"{slug} {lang}") for lang in languages],
            **extra,
        }
        resp = client.post('/api/v1/projects', json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_product(client):
    def _make(slug, price, **extra):
        payload = {
            "slug": slug,
            "price": price,
            "stock": 10,
            "translations": [{"language": "FR", "name": slug.replace('-', ' ').title()}],
            **extra,
        }
        resp = client.post('/api/v1/products', json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make
