"""Shared fixtures: an app wired to a temporary posts file and upload directory."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.store import PostStore
from app.main import create_app


def make_settings(tmp_path: Path, **overrides: object) -> Settings:
    values = {
        "POSTS_FILE": str(tmp_path / "data" / "posts.json"),
        "UPLOAD_DIRECTORY": str(tmp_path / "uploads"),
        "STATIC_DIRECTORY": str(tmp_path / "no-static-dir"),
        "DEBUG": False,
        "R2_ENDPOINT": "",
        "R2_ACCESS_KEY_ID": "",
        "R2_SECRET_ACCESS_KEY": "",
        "R2_PUBLIC_URL": "",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def posts_path(settings: Settings) -> Path:
    return Path(settings.POSTS_FILE)


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(tmp_path: Path) -> PostStore:
    s = PostStore(tmp_path / "posts.json")
    s.initialize()
    return s


@pytest.fixture
def make_client(tmp_path: Path):
    """Build a client for an app with some settings overridden"""
    opened = []

    def factory(**overrides: object) -> TestClient:
        c = TestClient(create_app(make_settings(tmp_path, **overrides)))
        c.__enter__()
        opened.append(c)
        return c

    yield factory
    for c in opened:
        c.__exit__(None, None, None)
