import sys
from dataclasses import replace
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


def _configure_path() -> None:
    project_root = Path(__file__).resolve().parents[1]
    if project_root.exists():
        sys.path.insert(0, str(project_root))


_configure_path()

from spinwheel.core.config import Settings
from spinwheel.db.base import Base
from spinwheel.db.session import build_engine, build_session_factory
from spinwheel.main import create_app
from spinwheel.services.spin_admission import SpinSubmission


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'spins.db'}",
        static_dir=tmp_path / "public",
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client():
    clients = []

    def factory(settings: Settings, **overrides) -> TestClient:
        app = create_app(replace(settings, **overrides) if overrides else settings)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    try:
        yield factory
    finally:
        for client in clients:
            client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)


@pytest.fixture
def submission():
    def factory(**overrides) -> SpinSubmission:
        data = {
            "name": "Ada",
            "email": "Ada@Example.com",
            "domain": "Websites",
            "discount": 10,
            "coupon_code": "ZTX-WEB10",
        }
        data.update(overrides)
        return SpinSubmission(**data)

    return factory


@pytest.fixture
def spin_payload():
    return {
        "name": "Ada",
        "email": "Ada@Example.com",
        "domain": "Websites",
        "discount": 10,
        "couponCode": "ZTX-WEB10",
    }
