import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from nonceguard.application.nonce_engine import NonceEngine
from nonceguard.presentation.csrf import require_nonce
from nonceguard.presentation.dependencies import (
    get_nonce_config,
    get_nonce_engine,
    get_nonce_store,
    get_session_id,
)


def create_test_app() -> FastAPI:
    app = FastAPI()

    @app.get("/forms/{action}/nonce")
    async def issue_nonce(action: str, engine: NonceEngine = Depends(get_nonce_engine)):
        return {"nonce": await engine.create(action)}

    @app.post("/signup", dependencies=[Depends(require_nonce("signup-form"))])
    async def signup():
        return {"status": "ok"}

    @app.post(
        "/custom",
        dependencies=[Depends(require_nonce("custom-form", header_name="X-Csrf"))],
    )
    async def custom():
        return {"status": "ok"}

    return app


@pytest.fixture()
def app(config, registry):
    app = create_test_app()

    def _get_store(session_id: str = Depends(get_session_id)):
        return registry.session(session_id)

    app.dependency_overrides[get_nonce_config] = lambda: config
    app.dependency_overrides[get_nonce_store] = _get_store
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    return TestClient(app, cookies={"session_id": "browser-1"})


@pytest.fixture()
def other_client(app):
    return TestClient(app, cookies={"session_id": "browser-2"})
