from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from protolab_api.core.config import Settings, get_settings
from protolab_api.main import create_app


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    # 进入上下文后 HTTP 与 WebSocket 会话共用同一事件循环。
    with TestClient(app) as api_client:
        yield api_client


@pytest.fixture
def create_workspace(client):
    def _create(name: str = "Grant Proposal Q2", type: str = "proposal", participants: list | None = None) -> dict:
        resp = client.post(
            "/api/collab/workspace",
            json={"name": name, "type": type, "participants": participants or []},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["workspace"]

    return _create


@pytest.fixture
def add_document(client):
    def _add(workspace_id: str, *, name: str = "Draft v1", type: str = "draft", content=None, **extra) -> dict:
        resp = client.post(
            f"/api/collab/workspace/{workspace_id}/document",
            json={"name": name, "type": type, "content": content, **extra},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["document"]

    return _add
