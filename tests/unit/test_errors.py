from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from lp.errors import NotFound, register_error_handlers


def make_app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFound("Learning plan not found")

    @app.get("/store")
    async def store():
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    return app


def test_service_errors_render_error_body():
    client = TestClient(make_app())
    response = client.get("/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "Learning plan not found"}


def test_store_errors_are_internal():
    client = TestClient(make_app())
    response = client.get("/store")
    assert response.status_code == 500
    assert response.json() == {"error": "Unknown error"}


def test_unexpected_errors_are_internal():
    client = TestClient(make_app(), raise_server_exceptions=False)
    response = client.get("/boom")
    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "Unknown error"}


def test_framework_errors_use_error_body():
    client = TestClient(make_app())
    not_found = client.get("/nowhere")
    assert not_found.status_code == 404
    assert not_found.json() == {"error": "Not Found"}

    wrong_method = client.post("/missing")
    assert wrong_method.status_code == 405
    assert wrong_method.json() == {"error": "Method Not Allowed"}
